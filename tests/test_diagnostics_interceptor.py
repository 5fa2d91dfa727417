import copy

from pretty_ts_errors.core.message_rewriter import MessageRewriter
from pretty_ts_errors.lsp.diagnostics_interceptor import (
    ORIGINAL_MESSAGE_KEY,
    PUBLISH_DIAGNOSTICS,
    DiagnosticsInterceptor,
)
from pretty_ts_errors.settings_models import PrettyTsErrorsConfig

SERVERS = ("tsserver", "typescript-language-server")


def _params(*messages, data=None):
    diagnostics = []
    for message in messages:
        item = {
            "range": {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 3}},
            "severity": 1,
            "message": message,
        }
        if data is not None:
            item["data"] = data
        diagnostics.append(item)
    return {"uri": "file:///proj/a.ts", "diagnostics": diagnostics}


def _interceptor(**config):
    rewriter = MessageRewriter(PrettyTsErrorsConfig(show_original_error=False, **config))
    return DiagnosticsInterceptor(rewriter, SERVERS)


def test_targeted_server_messages_are_rewritten():
    params = _params("Expected 2 arguments, but got 3")
    out = _interceptor().publish("typescript-language-server", params)
    item = out["diagnostics"][0]
    assert item["message"] == "→ This function takes 2 parameters, but you provided 3"
    assert item["data"] == {ORIGINAL_MESSAGE_KEY: "Expected 2 arguments, but got 3"}
    assert item["range"] == params["diagnostics"][0]["range"]
    assert out["uri"] == params["uri"]


def test_input_is_not_mutated():
    params = _params("Expected 2 arguments, but got 3", data={"fix": 1})
    before = copy.deepcopy(params)
    out = _interceptor().publish("tsserver", params)
    assert params == before
    assert out is not params
    assert out["diagnostics"][0]["data"] == {"fix": 1, ORIGINAL_MESSAGE_KEY: "Expected 2 arguments, but got 3"}


def test_other_servers_pass_through_untouched():
    params = _params("Expected 2 arguments, but got 3")
    assert _interceptor().publish("eslint", params) is params


def test_non_mapping_data_is_left_alone():
    params = _params("Expected 2 arguments, but got 3", data=[1, 2])
    out = _interceptor().publish("tsserver", params)
    assert out["diagnostics"][0]["data"] == [1, 2]


def test_show_original_is_included_in_published_message():
    rewriter = MessageRewriter(PrettyTsErrorsConfig(show_original_error=True))
    out = DiagnosticsInterceptor(rewriter, SERVERS).publish("tsserver", _params("Cannot find name 'x'."))
    assert out["diagnostics"][0]["message"].endswith("Original TS Error:\nCannot find name 'x'.")


def test_special_case_published_message_keeps_original():
    message = "Property 'x' is missing in type '{ y: string }' but required in type '{ x: number; y: string }'"
    rewriter = MessageRewriter(PrettyTsErrorsConfig(show_original_error=True))
    out = DiagnosticsInterceptor(rewriter, SERVERS).publish("tsserver", _params(message))
    published = out["diagnostics"][0]["message"]
    assert published.startswith("Property x is missing in type:")
    assert published.endswith(f"---\nOriginal TS Error:\n{message}")


def test_malformed_payloads_pass_through():
    interceptor = _interceptor()
    assert interceptor.publish("tsserver", None) is None
    bad = {"uri": "file:///a.ts", "diagnostics": "nope"}
    assert interceptor.publish("tsserver", bad) is bad
    mixed = {"uri": "file:///a.ts", "diagnostics": ["raw", {"message": "Expected 1 arguments, but got 0"}]}
    out = interceptor.publish("tsserver", mixed)
    assert out["diagnostics"][0] == "raw"
    assert out["diagnostics"][1]["message"] == "→ This function takes 1 parameters, but you provided 0"


def test_handle_notification_only_touches_publish():
    interceptor = _interceptor()
    params = _params("Expected 2 arguments, but got 3")
    assert interceptor.handle_notification("tsserver", "window/logMessage", params) is params
    out = interceptor.handle_notification("tsserver", PUBLISH_DIAGNOSTICS, params)
    assert out is not params
