import pytest

import mesh_manager.smoke as smoke_module
from conftest import FakeResponse
from mesh_manager.config import ClusterContext
from mesh_manager.constants import SMOKE_TEST_PAYLOAD
from mesh_manager.smoke import gateway_address, run_smoke_test, send_inference_request


def test_gateway_address_reads_status(fake_sh, cfg):
    fake_sh.handlers["kubectl"] = lambda call: "10.96.0.50\n"

    assert gateway_address(cfg) == "10.96.0.50"
    (call,) = fake_sh.calls_for("kubectl")
    assert call.args == ("get", "gateway/inference-gateway", "-o", "jsonpath={.status.addresses[0].value}")


def test_gateway_address_empty_is_fatal_after_single_read(fake_sh, cfg):
    with pytest.raises(RuntimeError, match="no address"):
        gateway_address(cfg)
    assert len(fake_sh.calls_for("kubectl")) == 1


def test_gateway_address_polls_when_configured(fake_sh, cfg):
    answers = iter(["", "", "10.96.0.51"])
    fake_sh.handlers["kubectl"] = lambda call: next(answers)

    address = gateway_address(cfg.model_copy(update={"gateway_address_attempts": 5}))

    assert address == "10.96.0.51"
    assert len(fake_sh.calls_for("kubectl")) == 3


def test_send_inference_request_posts_fixed_body(monkeypatch, cfg):
    seen = {}

    def fake_post(url, json, timeout):
        seen.update(url=url, json=json, timeout=timeout)
        return FakeResponse('{"choices": []}')

    monkeypatch.setattr(smoke_module.requests, "post", fake_post)

    resp = send_inference_request("10.96.0.50", cfg)

    assert resp.status_code == 200
    assert seen["url"] == "http://10.96.0.50:80/v1/chat/completions"
    assert seen["json"] == SMOKE_TEST_PAYLOAD
    assert seen["json"]["model"] == "food-review-2"


def test_non_2xx_response_is_not_validated(monkeypatch, cfg):
    monkeypatch.setattr(smoke_module.requests, "post", lambda *_a, **_k: FakeResponse("busy", 503, "Unavailable"))

    assert send_inference_request("10.96.0.50", cfg).status_code == 503


def test_run_smoke_test_switches_context_first(fake_sh, monkeypatch, cfg):
    fake_sh.handlers["kubectl"] = lambda call: "10.96.0.50" if call.args[0] == "get" else ""
    monkeypatch.setattr(smoke_module.requests, "post", lambda *_a, **_k: FakeResponse("{}"))

    run_smoke_test(ClusterContext("primary-1"), cfg)

    first, second = fake_sh.calls_for("kubectl")
    assert first.args == ("config", "use-context", "kind-primary-1")
    assert second.args[0] == "get"
