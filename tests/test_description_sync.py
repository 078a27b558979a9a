"""
Tests de la normalisation des descriptions et de la façade de synchronisation.
"""

from unittest.mock import Mock

import pytest

from app.services.description_sync import (
    DescriptionSyncFacade,
    normalize_category,
    normalize_description,
    strip_tags,
)
from app.services.errors import NoStoreConfiguredError, RemoteError
from app.services.nuvemshop.categories import CategoryClient


class TestNormalization:

    def test_localized_map_prefers_pt(self):
        """Test: pt est prioritaire"""
        description = {"en": "<p>EN</p>", "es": "<p>ES</p>", "pt": "<p>PT</p>"}
        assert normalize_description(description) == ("PT", "<p>PT</p>")

    @pytest.mark.parametrize("description, expected", [
        ({"es": "<i>ES</i>", "en": "EN"}, "<i>ES</i>"),
        ({"en": "EN"}, "EN"),
        ({"fr": "FR"}, ""),
        ({}, ""),
    ])
    def test_language_fallback(self, description, expected):
        """Test: repli pt -> es -> en -> chaîne vide"""
        assert normalize_description(description)[1] == expected

    def test_plain_string(self):
        """Test: description en chaîne simple"""
        assert normalize_description("<p>Hello <b>world</b></p>") == ("Hello world", "<p>Hello <b>world</b></p>")

    @pytest.mark.parametrize("description", [None, 42, ["pt"]])
    def test_unexpected_shapes(self, description):
        """Test: forme inattendue -> description vide"""
        assert normalize_description(description) == ("", "")

    def test_idempotent(self):
        """Test: renormaliser une description déjà normalisée ne change rien"""
        content, html_content = normalize_description({"pt": "<p>Old</p>"})
        assert normalize_description(html_content) == (content, html_content)

    @pytest.mark.parametrize("html", [
        "<p>Old</p>",
        '<div class="x"><a href="/c">link</a> text</div>',
        "no markup",
        "<ul><li>1</li><li>2</li></ul>",
    ])
    def test_content_is_markup_free(self, html):
        """Test: content == strip_tags(html_content) et ne contient plus de balise"""
        content, html_content = normalize_description({"pt": html})
        assert content == strip_tags(html_content)
        assert "<" not in content

    def test_normalize_category_shape(self):
        """Test: forme normalisée d'une catégorie"""
        category = {"id": 1, "name": {"pt": "Shoes"}, "description": {"pt": "<p>Old</p>"}}
        assert normalize_category(category) == {
            "id": 1,
            "category_id": 1,
            "name": {"pt": "Shoes"},
            "content": "Old",
            "html_content": "<p>Old</p>",
        }


class TestDescriptionSyncFacade:

    def setup_method(self):
        self.client = Mock(spec=CategoryClient)
        self.client.single_tenant_mode = True
        self.facade = DescriptionSyncFacade(self.client)

    def test_list_with_descriptions(self):
        """Test: liste normalisée, ordre conservé"""
        self.client.list_categories.return_value = [
            {"id": 1, "name": {"pt": "Shoes"}, "description": {"pt": "<p>Old</p>"}},
            {"id": 2, "name": {"pt": "Hats"}, "description": "plain"},
        ]

        result = self.facade.list_with_descriptions()

        self.client.list_categories.assert_called_once_with(None)
        assert result == [
            {"id": 1, "category_id": 1, "name": {"pt": "Shoes"}, "content": "Old", "html_content": "<p>Old</p>"},
            {"id": 2, "category_id": 2, "name": {"pt": "Hats"}, "content": "plain", "html_content": "plain"},
        ]

    def test_get_description(self):
        """Test: catégorie unique normalisée"""
        self.client.get_category.return_value = {"id": 7, "name": {}, "description": {"es": "<b>hola</b>"}}

        result = self.facade.get_description("7", "42")

        self.client.get_category.assert_called_once_with("7", "42")
        assert result["content"] == "hola"
        assert result["html_content"] == "<b>hola</b>"

    def test_set_description_ignores_plain_content(self):
        """Test: seul html_content part chez Nuvemshop"""
        self.client.update_category_description.return_value = {
            "id": 7, "name": {"pt": "A"}, "description": {"pt": "<p>new</p>"},
        }

        result = self.facade.set_description("42", "7", "this is ignored", "<p>new</p>")

        self.client.update_category_description.assert_called_once_with("42", "7", "<p>new</p>")
        assert result["content"] == "new"

    def test_clear_description(self):
        """Test: effacer = envoyer une description vide"""
        self.client.update_category_description.return_value = {"id": 7, "description": {"pt": ""}}

        assert self.facade.clear_description("42", "7") is None

        self.client.update_category_description.assert_called_once_with("42", "7", "")

    def test_errors_propagate(self):
        """Test: les erreurs du client remontent telles quelles"""
        self.client.list_categories.side_effect = RemoteError(500, "boom")

        with pytest.raises(RemoteError):
            self.facade.list_with_descriptions("42")


def test_scenario_list_with_descriptions(stores, store, nuvemshop, http_client):
    """Test: scénario complet GET catégories -> liste normalisée"""
    nuvemshop.reply("GET", "/2025-03/42/categories", json_body=[
        {"id": 1, "name": {"pt": "Shoes"}, "description": {"pt": "<p>Old</p>"}},
    ])
    facade = DescriptionSyncFacade(CategoryClient(stores, http_client=http_client))

    assert facade.list_with_descriptions() == [
        {"id": 1, "category_id": 1, "name": {"pt": "Shoes"}, "content": "Old", "html_content": "<p>Old</p>"},
    ]


class TestFacadeStoreResolution:

    def test_single_tenant_fallback(self, stores, store):
        """Test: sans store_id, la façade retombe sur la première boutique"""
        facade = DescriptionSyncFacade(CategoryClient(stores))

        assert facade.resolve_store_id() == "42"

    def test_follows_client_tenancy_flag(self, stores, store):
        """Test: multi-boutique côté client -> pas de repli côté façade non plus"""
        facade = DescriptionSyncFacade(CategoryClient(stores, single_tenant_mode=False))

        with pytest.raises(NoStoreConfiguredError):
            facade.resolve_store_id()

        assert facade.resolve_store_id("42") == "42"
