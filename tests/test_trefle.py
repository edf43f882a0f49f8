"""
Trefle catalog client tests.
"""
from unittest.mock import patch

import pytest
import requests

from config import Settings
from conftest import mock_response
from errors import ProviderUnavailable
from trefle import get_plant_by_id, parse_candidate, search_plants

SEARCH_PAYLOAD = {
    "data": [
        {
            "id": 1,
            "common_name": "Olive",
            "scientific_name": "Olea europaea",
            "family": "Oleaceae",
            "genus": "Olea",
            "image_url": "https://example.com/olive.jpg",
        },
        {"id": 2, "common_name": None, "scientific_name": "Lavandula stoechas", "family": None},
        {"id": 3, "common_name": "Broken", "scientific_name": None},
    ],
}


class TestParseCandidate:

    def test_defaults_for_missing_names(self):
        candidate = parse_candidate({"id": 9, "scientific_name": "Cistus albidus"})
        assert candidate.common_name == "Unknown"
        assert candidate.family == "Unknown"
        assert candidate.image_url is None

    def test_requires_id_and_scientific_name(self):
        assert parse_candidate({"id": 9}) is None
        assert parse_candidate({"scientific_name": "Cistus albidus"}) is None


class TestSearchPlants:

    def test_missing_token_returns_empty(self):
        settings = Settings(openweather_api_key="k", trefle_token=None)
        with patch("trefle.requests.get") as mock_get:
            assert search_plants("olive", 10, settings) == []
        mock_get.assert_not_called()

    def test_parses_results(self, settings):
        with patch("trefle.requests.get", return_value=mock_response(200, SEARCH_PAYLOAD)) as mock_get:
            plants = search_plants("olive", 10, settings)

        params = mock_get.call_args.kwargs["params"]
        assert params == {"token": "test-trefle-token", "q": "olive", "limit": 10}
        assert [p.id for p in plants] == [1, 2]
        assert plants[0].common_name == "Olive"
        assert plants[0].image_url == "https://example.com/olive.jpg"
        assert plants[1].common_name == "Unknown"
        assert plants[1].family == "Unknown"

    def test_respects_limit(self, settings):
        with patch("trefle.requests.get", return_value=mock_response(200, SEARCH_PAYLOAD)):
            assert len(search_plants("olive", 1, settings)) == 1

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected_token_returns_empty(self, settings, status):
        with patch("trefle.requests.get", return_value=mock_response(status, {"error": True})) as mock_get:
            assert search_plants("olive", 10, settings=settings) == []
        mock_get.assert_called_once()

    def test_server_error_raises(self, settings):
        with patch("trefle.requests.get", return_value=mock_response(500, {"error": "boom"})):
            with pytest.raises(ProviderUnavailable) as exc_info:
                search_plants("olive", 10, settings)
        assert exc_info.value.status_code == 500

    def test_network_error_raises(self, settings):
        with patch("trefle.requests.get", side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(ProviderUnavailable):
                search_plants("olive", 10, settings)


class TestGetPlantById:

    def test_returns_growth_and_genus(self, settings):
        payload = {
            "data": {
                "id": 42,
                "common_name": None,
                "scientific_name": "Olea europaea",
                "family": "Oleaceae",
                "genus": {"name": "Olea"},
                "image_url": None,
                "main_species": {"image_url": "https://example.com/o.jpg", "growth": {"light": 9}},
            }
        }
        with patch("trefle.requests.get", return_value=mock_response(200, payload)):
            plant = get_plant_by_id(42, settings)

        assert plant.common_name == "Olea europaea"
        assert plant.genus == "Olea"
        assert plant.image_url == "https://example.com/o.jpg"
        assert plant.growth == {"light": 9}

    def test_not_found(self, settings):
        with patch("trefle.requests.get", return_value=mock_response(404, {"error": True})):
            assert get_plant_by_id(42, settings) is None

    def test_network_error(self, settings):
        with patch("trefle.requests.get", side_effect=requests.exceptions.Timeout()):
            assert get_plant_by_id(42, settings) is None
