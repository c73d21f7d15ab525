import pytest
import sh

import mesh_manager.linker as linker_module
import mesh_manager.resolver as resolver_module
import mesh_manager.smoke as smoke_module
from conftest import FakeDockerClient, FakeResponse
from mesh_manager.config import DemoConfig, SetupOptions
from mesh_manager.orchestrator import delete_clusters, run_setup


@pytest.fixture
def environment(fake_sh, monkeypatch):
    posts = []

    def kubectl(call):
        if call.args[0] == "get":
            return "10.96.0.50"
        return ""

    fake_sh.handlers.update({
        "kubectl": kubectl,
        "kind": lambda call: f"{call.args[-1]}-control-plane\n",
        "go": lambda call: f"secret-for-{call.context()}" if call.has("create-remote-secret") else "",
    })
    monkeypatch.setattr(linker_module.docker, "from_env", lambda: FakeDockerClient({
        "primary-1-control-plane": {"kind": {"IPAddress": "172.18.0.2"}},
        "primary-2-control-plane": {"kind": {"IPAddress": "172.18.0.3"}},
    }))
    monkeypatch.setattr(resolver_module.requests, "get", lambda *_a, **_k: FakeResponse("1.28.3\n"))
    monkeypatch.setattr(smoke_module.requests, "post",
                        lambda url, **kwargs: posts.append(url) or FakeResponse("{}"))
    fake_sh.posts = posts
    return fake_sh


def _phase(call):
    if call.program == "bash":
        return "bootstrap"
    if call.program == "go":
        return "secret" if call.has("create-remote-secret") else "mesh"
    if call.program == "kubectl" and call.has("config"):
        return "use-context"
    if call.program == "kubectl" and call.has("-"):
        return "secret"
    if call.program == "kubectl" and call.has("get"):
        return "gateway"
    if call.program == "kind":
        return "secret"
    return "inference"


def _collapse(items):
    out = []
    for item in items:
        if not out or out[-1] != item:
            out.append(item)
    return out


def test_full_run_order(environment, cfg, istio_repo):
    run_setup(cfg, SetupOptions(), istio_repo.parent)

    calls = environment.calls
    phases = _collapse([(_phase(c), c.context()) for c in calls if c.program != "kind"])
    assert phases == [
        ("bootstrap", None),
        ("mesh", "kind-primary-1"),
        ("inference", "kind-primary-1"),
        ("mesh", "kind-primary-2"),
        ("inference", "kind-primary-2"),
        # generated against primary-2, applied to primary-1, then the reverse
        ("secret", "kind-primary-2"),
        ("secret", "kind-primary-1"),
        ("secret", "kind-primary-2"),
        ("use-context", None),
        ("gateway", None),
    ]
    assert environment.posts == ["http://10.96.0.50:80/v1/chat/completions"]


def test_full_run_passes_tag_to_both_installs(environment, cfg, istio_repo):
    run_setup(cfg, SetupOptions(), istio_repo.parent)

    installs = [c for c in environment.calls_for("go") if c.has("install")]
    assert [c.context() for c in installs] == ["kind-primary-1", "kind-primary-2"]
    assert all(c.has("tag=1.28.3") for c in installs)
    assert installs[0].has("values.global.multiCluster.clusterName=primary-1")
    assert installs[1].has("values.global.multiCluster.clusterName=primary-2")


def test_tag_override_skips_version_fetch(environment, monkeypatch, cfg, istio_repo):
    def unreachable(*_args, **_kwargs):
        raise AssertionError("version endpoint must not be called")

    monkeypatch.setattr(resolver_module.requests, "get", unreachable)

    run_setup(cfg, SetupOptions(tag="1.29.0", skip_bootstrap=True, skip_smoke_test=True), istio_repo.parent)

    assert all(c.has("tag=1.29.0") for c in environment.calls_for("go") if c.has("install"))
    assert environment.calls_for("bash") == []
    assert environment.posts == []


def test_chart_failure_on_first_cluster_stops_pipeline(environment, cfg, istio_repo):
    def failing_helm(call):
        if call.context() == "kind-primary-1" and call.has("vllm-llama3-8b-instruct"):
            raise RuntimeError("helm install failed")
        return ""

    environment.handlers["helm"] = failing_helm

    with pytest.raises(RuntimeError, match="helm install failed"):
        run_setup(cfg, SetupOptions(), istio_repo.parent)

    assert not any(c.context() == "kind-primary-2" for c in environment.calls)
    assert not any(c.has("create-remote-secret") for c in environment.calls)
    assert environment.calls_for("kind") == []
    assert environment.posts == []


def test_tool_failure_propagates_unchanged(environment, cfg, istio_repo):
    failure = sh.ErrorReturnCode_1(
        "helm install vllm-gpt5-oss", b"", b"Error: INSTALLATION FAILED: cannot re-use a name")

    def failing_helm(call):
        if call.has("vllm-gpt5-oss"):
            raise failure
        return ""

    environment.handlers["helm"] = failing_helm

    with pytest.raises(sh.ErrorReturnCode_1) as excinfo:
        run_setup(cfg, SetupOptions(), istio_repo.parent)
    assert excinfo.value is failure
    assert b"cannot re-use a name" in excinfo.value.stderr
    assert not any(c.has("create-remote-secret") for c in environment.calls)


def test_missing_local_manifest_aborts_before_any_external_call(environment, monkeypatch, cfg, assets_dir,
                                                               istio_repo):
    (assets_dir / "httproute.yaml").unlink()

    def unreachable(*_args, **_kwargs):
        raise AssertionError("version endpoint must not be called")

    monkeypatch.setattr(resolver_module.requests, "get", unreachable)

    with pytest.raises(RuntimeError, match="HTTPRoute manifest"):
        run_setup(cfg, SetupOptions(), istio_repo.parent)
    assert environment.calls == []


def test_missing_topology_is_ignored_when_bootstrap_skipped(environment, cfg, assets_dir, istio_repo):
    (assets_dir / "multicluster-single-network.json").unlink()

    run_setup(cfg, SetupOptions(skip_bootstrap=True, skip_smoke_test=True), istio_repo.parent)

    assert environment.calls_for("bash") == []
    assert len([c for c in environment.calls_for("go") if c.has("install")]) == 2


def test_parallel_clusters_configure_both_then_link(environment, cfg, istio_repo):
    run_setup(cfg, SetupOptions(parallel_clusters=True, skip_bootstrap=True), istio_repo.parent)

    installs = {c.context() for c in environment.calls_for("go") if c.has("install")}
    assert installs == {"kind-primary-1", "kind-primary-2"}
    secrets = [c for c in environment.calls_for("go") if c.has("create-remote-secret")]
    assert len(secrets) == 2
    first_secret = environment.calls.index(secrets[0])
    assert all(environment.calls.index(c) < first_secret
               for c in environment.calls_for("helm"))


def test_parallel_failure_skips_linking(environment, cfg, istio_repo):
    def failing_helm(call):
        if call.context() == "kind-primary-2":
            raise RuntimeError("helm install failed")
        return ""

    environment.handlers["helm"] = failing_helm

    with pytest.raises(RuntimeError, match="helm install failed"):
        run_setup(cfg, SetupOptions(parallel_clusters=True, skip_bootstrap=True), istio_repo.parent)
    assert not any(c.has("create-remote-secret") for c in environment.calls)


def test_missing_integ_suite_aborts_before_installs(environment, cfg, tmp_path):
    (tmp_path / "istio").mkdir()

    with pytest.raises(RuntimeError, match="integ-suite-kind.sh"):
        run_setup(cfg, SetupOptions(), tmp_path)
    assert environment.calls_for("go") == []


def test_delete_clusters(fake_sh):
    delete_clusters(DemoConfig())

    assert [c.args for c in fake_sh.calls_for("kind")] == [
        ("delete", "cluster", "--name", "primary-1"),
        ("delete", "cluster", "--name", "primary-2"),
    ]
