from __future__ import annotations

import unittest
from unittest.mock import create_autospec, patch

from hab_bridge.models.schemas import ServerConfig
from hab_bridge.services.browser_service import NO_ACTIVE_EDITOR_MESSAGE, open_browser, open_ui
from hab_bridge.services.error_service import (
    DISABLE_REST_ACTION,
    OPEN_SETTINGS_COMMAND,
    SET_HOST_ACTION,
    extract_error_message,
    present_request_error,
    resolve_error_action,
)
from hab_bridge.services.log_service import OperationLog


CONFIG = ServerConfig(host="h", port=8080)


class TestOpenBrowser(unittest.TestCase):
    def test_no_active_editor_is_an_info_notice(self) -> None:
        response = open_browser(CONFIG, "/basicui/app?%s", None)
        self.assertFalse(response.success)
        self.assertIsNone(response.command)
        self.assertEqual("info", response.notice.level)
        self.assertEqual(NO_ACTIVE_EDITOR_MESSAGE, response.notice.message)

    def test_relative_url_with_selection(self) -> None:
        response = open_browser(CONFIG, "/basicui/app?%s", "my item")
        self.assertTrue(response.success)
        self.assertEqual("vscode.open", response.command.command)
        self.assertEqual(["http://h:8080/basicui/app?my%20item"], response.command.arguments)

    def test_absolute_url_keeps_host(self) -> None:
        response = open_browser(CONFIG, "https://docs.openhab.org/search?q=%s", "")
        self.assertEqual("https://docs.openhab.org/search?q=", response.data["url"])


class TestOpenUi(unittest.TestCase):
    def test_default_query_is_basic_ui(self) -> None:
        log = create_autospec(OperationLog, instance=True)
        panel = open_ui(CONFIG, log=log)
        self.assertEqual("http://h:8080/basicui/app", panel.url)
        self.assertIsNone(panel.title)
        log.append_line.assert_called_once_with("URL that will be opened is: http://h:8080/basicui/app")

    def test_custom_query_and_title(self) -> None:
        log = create_autospec(OperationLog, instance=True)
        panel = open_ui(CONFIG, log=log, query="/habpanel/index.html", title="HABPanel")
        self.assertEqual("http://h:8080/habpanel/index.html", panel.url)
        self.assertEqual("HABPanel", panel.title)


class TestRequestErrors(unittest.TestCase):
    def setUp(self) -> None:
        self.log = create_autospec(OperationLog, instance=True)

    def test_extract_message(self) -> None:
        self.assertEqual("ECONNREFUSED", extract_error_message("ECONNREFUSED"))
        self.assertEqual("Not found", extract_error_message({"message": "Not found"}))
        self.assertEqual("", extract_error_message({"http-code": 500}))
        self.assertEqual("", extract_error_message(None))

    def test_prompt_offers_two_actions(self) -> None:
        prompt = present_request_error({"message": "timeout"}, log=self.log)
        self.assertEqual("Error while connecting to openHAB REST API. timeout", prompt.message)
        self.assertEqual([SET_HOST_ACTION, DISABLE_REST_ACTION], prompt.actions)

    def test_set_host_opens_settings(self) -> None:
        response = resolve_error_action(SET_HOST_ACTION, log=self.log)
        self.assertEqual(OPEN_SETTINGS_COMMAND, response.command.command)

    def test_disable_rest_persists(self) -> None:
        with patch("hab_bridge.services.error_service.disable_rest_api") as disable:
            response = resolve_error_action(DISABLE_REST_ACTION, log=self.log)
        disable.assert_called_once_with()
        self.assertTrue(response.success)
        self.assertIsNone(response.command)

    def test_dismissed_choice_does_nothing(self) -> None:
        with patch("hab_bridge.services.error_service.disable_rest_api") as disable:
            for choice in (None, "Something else"):
                response = resolve_error_action(choice, log=self.log)
                self.assertFalse(response.success)
                self.assertIsNone(response.command)
        disable.assert_not_called()


if __name__ == "__main__":
    unittest.main()
