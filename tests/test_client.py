from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock
from urllib.parse import urlsplit

import requests

from discogs_api import ApiError, DiscogsClient, DiscogsError, TransportError, __version__

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> bytes:
    return (FIXTURES / name).read_bytes()


def make_response(body: bytes, status: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.url = "http://discogs.com/"
    return response


class ClientTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.session = requests.Session()
        self.session.get = mock.Mock(
            return_value=make_response(load_fixture("search.xml"))
        )
        self.client = DiscogsClient("secret", session=self.session)

    def respond_with(self, body: bytes, status: int = 200) -> None:
        self.session.get.return_value = make_response(body, status)

    def requested_url(self) -> str:
        return self.session.get.call_args.args[0]

    def requested_query(self) -> str:
        return urlsplit(self.requested_url()).query


class ConfigurationTests(ClientTestCase):
    def test_defaults(self) -> None:
        self.assertEqual(self.client.get_timeout(), 60)
        self.assertEqual(self.client.get_user_agent(), f"Python Discogs/{__version__} ")

    def test_timeout_round_trip(self) -> None:
        for seconds in (0, 1, 30, 60, 3600):
            self.client.set_timeout(seconds)
            self.assertEqual(self.client.get_timeout(), seconds)

    def test_timeout_is_coerced_to_int(self) -> None:
        self.client.set_timeout("15")
        self.assertEqual(self.client.get_timeout(), 15)

    def test_user_agent_suffix(self) -> None:
        prefix = f"Python Discogs/{__version__} "
        for suffix in ("", "MyApp/2.0", "crate digger (+https://example.org)"):
            self.client.set_user_agent(suffix)
            user_agent = self.client.get_user_agent()
            self.assertTrue(user_agent.startswith(prefix))
            self.assertEqual(user_agent[len(prefix):], suffix)

    def test_api_key_required(self) -> None:
        with self.assertRaises(ValueError):
            DiscogsClient("")

    def test_set_api_key_is_used_by_next_call(self) -> None:
        self.client.set_api_key("rotated")
        self.client.call("search")
        self.assertIn("api_key=rotated", self.requested_query())

    def test_from_settings(self) -> None:
        env = {
            "DISCOGS_API_KEY": "from-env",
            "DISCOGS_TIMEOUT": "12",
            "DISCOGS_USER_AGENT": "EnvApp/1.0",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            client = DiscogsClient.from_settings(session=self.session)

        self.assertEqual(client.config.api_key, "from-env")
        self.assertEqual(client.get_timeout(), 12)
        self.assertTrue(client.get_user_agent().endswith(" EnvApp/1.0"))
        self.assertEqual(client.config.base_url, "http://discogs.com")

    def test_context_manager_closes_session(self) -> None:
        self.session.close = mock.Mock()
        with self.client as client:
            self.assertIs(client, self.client)
        self.session.close.assert_called_once_with()


class CallTests(ClientTestCase):
    def test_appends_format_and_api_key(self) -> None:
        self.client.call("search", {"a": "x", "b": "y"})

        query = self.requested_query()
        self.assertEqual(query, "a=x&b=y&f=xml&api_key=secret")
        self.assertFalse(query.startswith("&"))

    def test_mandatory_parameters_override_caller_values(self) -> None:
        self.client.call("search", {"f": "json", "api_key": "other"})

        self.assertEqual(self.requested_query(), "f=xml&api_key=secret")

    def test_builds_absolute_url(self) -> None:
        self.client.call("search", {"q": "Persuader, The"})

        self.assertEqual(
            self.requested_url(),
            "http://discogs.com/search?q=Persuader%2C+The&f=xml&api_key=secret",
        )

    def test_non_default_port_is_applied(self) -> None:
        client = DiscogsClient("secret", port=8080, session=self.session)
        client.call("search")

        self.assertTrue(self.requested_url().startswith("http://discogs.com:8080/search?"))

    def test_request_options(self) -> None:
        self.client.set_user_agent("MyApp/2.0")
        self.client.set_timeout(5)
        self.client.call("search")

        kwargs = self.session.get.call_args.kwargs
        self.assertEqual(kwargs["headers"]["User-Agent"], f"Python Discogs/{__version__} MyApp/2.0")
        self.assertEqual(kwargs["timeout"], 5)
        self.assertTrue(kwargs["allow_redirects"])
        self.assertEqual(self.session.headers["Accept-Encoding"], "gzip")

    def test_zero_timeout_waits_indefinitely(self) -> None:
        self.client.set_timeout(0)
        self.client.call("search")

        self.assertIsNone(self.session.get.call_args.kwargs["timeout"])

    def test_returns_parsed_document(self) -> None:
        document = self.client.call("search")

        self.assertEqual(document.find("exactresults").find("title").get_text(), "Persuader, The")

    def test_error_element_becomes_api_error(self) -> None:
        self.respond_with(b"<error>Not found</error>", status=404)

        with self.assertRaises(ApiError) as ctx:
            self.client.call("release/0")
        self.assertEqual(ctx.exception.message, "Not found")
        self.assertEqual(ctx.exception.code, 404)

    def test_error_element_inside_envelope(self) -> None:
        self.respond_with(load_fixture("error.xml"), status=404)

        with self.assertRaises(ApiError) as ctx:
            self.client.get_release(0)
        self.assertEqual(ctx.exception.message, "Not found")

    def test_error_status_without_error_element(self) -> None:
        self.respond_with(b"<html><body>Bad gateway</body></html>", status=502)

        with self.assertLogs("discogs_api.client", level="WARNING"):
            with self.assertRaises(ApiError) as ctx:
                self.client.call("search")
        self.assertEqual(ctx.exception.message, "Invalid headers (502)")
        self.assertEqual(ctx.exception.code, 502)

    def test_non_xml_body_is_invalid(self) -> None:
        self.respond_with(b"this is not xml at all")

        with self.assertRaises(ApiError) as ctx:
            self.client.call("search")
        self.assertEqual(ctx.exception.message, "Invalid XML")
        self.assertEqual(ctx.exception.code, 0)

    def test_truncated_body_is_invalid(self) -> None:
        self.respond_with(
            b"<resp><release id='1' status='Accepted'><title>Stockholm</title>"
        )

        with self.assertRaises(ApiError) as ctx:
            self.client.get_release(1)
        self.assertEqual(ctx.exception.message, "Invalid XML")

    def test_mismatched_tags_are_invalid(self) -> None:
        for body in (
            b"<resp><a><b></a></resp>",
            b"<html><body><p>Maintenance<br></body></html>",
        ):
            self.respond_with(body)
            with self.assertRaises(ApiError) as ctx:
                self.client.call("search")
            self.assertEqual(ctx.exception.message, "Invalid XML", body)

    def test_empty_body_is_invalid(self) -> None:
        self.respond_with(b"")

        with self.assertRaises(ApiError):
            self.client.call("search")

    def test_timeout_becomes_transport_error(self) -> None:
        self.session.get.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(TransportError) as ctx:
            self.client.call("search")
        self.assertEqual(ctx.exception.code, 28)
        self.assertIsInstance(ctx.exception.__cause__, requests.Timeout)

    def test_connection_failure_becomes_transport_error(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("Name or service not known")

        with self.assertRaises(DiscogsError) as ctx:
            self.client.call("search")
        self.assertIsInstance(ctx.exception, TransportError)
        self.assertEqual(ctx.exception.code, 7)
        self.assertIn("Name or service not known", ctx.exception.message)


class EndpointTests(ClientTestCase):
    def test_get_release(self) -> None:
        self.respond_with(load_fixture("release.xml"))

        release = self.client.get_release(1)

        self.assertEqual(urlsplit(self.requested_url()).path, "/release/1")
        self.assertEqual(release["title"], "Stockholm")
        self.assertEqual(len(release["tracklist"]), 3)

    def test_get_release_with_empty_tracklist(self) -> None:
        self.respond_with(load_fixture("release_minimal.xml"))

        self.assertEqual(self.client.get_release("42")["tracklist"], [])

    def test_missing_root_node(self) -> None:
        self.respond_with(load_fixture("search.xml"))

        with self.assertRaises(ApiError) as ctx:
            self.client.get_release(1)
        self.assertEqual(ctx.exception.message, "Invalid XML.")

    def test_get_artist_encodes_name(self) -> None:
        self.respond_with(load_fixture("artist.xml"))

        artist = self.client.get_artist("Ralf & Florian")

        self.assertEqual(urlsplit(self.requested_url()).path, "/artist/Ralf+%26+Florian")
        self.assertEqual(artist["name"], "Kraftwerk")

    def test_get_artist_without_optional_nodes(self) -> None:
        self.respond_with(load_fixture("artist_minimal.xml"))

        artist = self.client.get_artist("Nobody")

        for key in ("urls", "name_variations", "aliases", "images", "releases"):
            self.assertNotIn(key, artist)

    def test_get_label(self) -> None:
        self.respond_with(load_fixture("label.xml"))

        label = self.client.get_label("Svek")

        self.assertEqual(urlsplit(self.requested_url()).path, "/label/Svek")
        self.assertEqual(label["parent_label"], "Sony Music")

    def test_get_label_missing_root(self) -> None:
        self.respond_with(load_fixture("artist.xml"))

        with self.assertRaises(ApiError):
            self.client.get_label("Svek")

    def test_search_first_page_omits_page(self) -> None:
        results = self.client.search("stockholm")

        self.assertEqual(self.requested_query(), "type=all&q=stockholm&f=xml&api_key=secret")
        self.assertEqual(results["search_results"][0]["id"], "12345")

    def test_search_later_page_is_sent(self) -> None:
        self.client.search("stockholm", type="releases", page=3)

        self.assertEqual(
            self.requested_query(), "type=releases&q=stockholm&page=3&f=xml&api_key=secret"
        )

    def test_search_without_results(self) -> None:
        self.respond_with(b"<resp stat='ok'/>")

        self.assertEqual(
            self.client.search("nothing"), {"exact_results": [], "search_results": []}
        )


if __name__ == "__main__":
    unittest.main()
