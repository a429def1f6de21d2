from dataclasses import replace
from types import SimpleNamespace

import pytest

from pipeline_kit import assembler
from pipeline_kit.actions import build_deploy_action
from pipeline_kit.compute_service import build_compute_service
from pipeline_kit.config import PipelineConfig
from pipeline_kit.network import build_network
from pipeline_kit.registry import build_registry
from pipeline_kit.specs import Artifact, BuildActionSpec, DeployActionSpec, SourceActionSpec, StageSpec


def _cfg() -> PipelineConfig:
    return PipelineConfig(
        app_name="payslip-app-cdk",
        source_owner="KierenMartin",
        source_repo="employee-pay-slip",
        registry_host="123456789012.dkr.ecr.us-east-1.amazonaws.com",
        source_branch="master",
    )


def test_assemble_produces_source_build_deploy() -> None:
    pipeline = assembler.assemble(_cfg())

    assert [s.name for s in pipeline.stages] == ["Source", "Build", "Deploy"]
    assert all(len(s.actions) == 1 for s in pipeline.stages)

    source, build, deploy = (s.actions[0] for s in pipeline.stages)
    assert isinstance(source, SourceActionSpec)
    assert isinstance(build, BuildActionSpec)
    assert isinstance(deploy, DeployActionSpec)
    assert (source.owner, source.repo, source.branch) == (
        "KierenMartin",
        "employee-pay-slip",
        "master",
    )


def test_artifacts_chain_between_stages() -> None:
    pipeline = assembler.assemble(_cfg())
    source, build, deploy = (s.actions[0] for s in pipeline.stages)

    assert source.output == build.input
    assert len(build.outputs) == 1
    assert build.outputs[0] == deploy.input
    assert source.output != build.outputs[0]


def test_assemble_is_idempotent() -> None:
    cfg = _cfg()

    assert assembler.assemble(cfg) == assembler.assemble(cfg)


def test_credentials_are_referenced_by_name_only() -> None:
    cfg = replace(_cfg(), source_token_secret="github-oauth-token")

    source = assembler.assemble(cfg).stages[0].actions[0]

    assert source.credentials.name == "github-oauth-token"
    assert source.credentials.version == "latest"


def test_known_limitations_are_attached() -> None:
    pipeline = assembler.assemble(_cfg())

    assert len(pipeline.notices) == 2
    assert "okaycloud/dummywebserver:latest" in pipeline.notices[0]
    assert "123456789012.dkr.ecr.us-east-1.amazonaws.com/payslip-app-cdk" in pipeline.notices[1]


def test_malformed_cidr_fails_assembly() -> None:
    cfg = replace(_cfg(), vpc_cidr="10.0.0.0/99")

    with pytest.raises(ValueError):
        assembler.assemble(cfg)


def test_compute_service_defaults() -> None:
    network = build_network("10.1.0.0/16", 3)
    registry = build_registry("app", "registry.example.com")

    service = build_compute_service(network, registry)

    assert service.container_port == 8080
    assert service.cpu == 256
    assert service.memory_mib == 512
    assert service.assign_public_ip is True
    assert service.container_name == "app"
    assert service.image == "okaycloud/dummywebserver:latest"
    assert service.network == network
    assert service.registry == registry


def test_compute_service_requires_placeholder_image() -> None:
    network = build_network()
    registry = build_registry("app", "registry.example.com")

    with pytest.raises(ValueError):
        build_compute_service(network, registry, image="")


def test_validate_rejects_artifact_not_produced_earlier() -> None:
    pipeline = assembler.assemble(_cfg())
    source_stage, build_stage, deploy_stage = pipeline.stages
    deploy = deploy_stage.actions[0]
    stray = build_deploy_action(deploy.service, Artifact("Nowhere"))

    with pytest.raises(ValueError) as excinfo:
        assembler.validate_stages(
            [source_stage, build_stage, StageSpec(name="Deploy", actions=(stray,))]
        )

    assert "Nowhere" in str(excinfo.value)


def test_validate_rejects_out_of_order_stages() -> None:
    source_stage, build_stage, deploy_stage = assembler.assemble(_cfg()).stages

    with pytest.raises(ValueError):
        assembler.validate_stages([source_stage, deploy_stage, build_stage])


def test_validate_rejects_second_consumer() -> None:
    source_stage, build_stage, deploy_stage = assembler.assemble(_cfg()).stages
    again = StageSpec(name="DeployAgain", actions=deploy_stage.actions)

    with pytest.raises(ValueError) as excinfo:
        assembler.validate_stages([source_stage, build_stage, deploy_stage, again])

    assert "BuildOutput" in str(excinfo.value)


def test_validate_rejects_duplicate_stage_names() -> None:
    source_stage, build_stage, _ = assembler.assemble(_cfg()).stages

    with pytest.raises(ValueError):
        assembler.validate_stages([source_stage, StageSpec(name="Source", actions=build_stage.actions)])


def test_plan_lists_stages_and_limitations() -> None:
    cfg = _cfg()
    report = assembler.plan_pipeline(cfg, assembler.assemble(cfg))

    assert "- Source: my_github_source (in: -, out: SourceOutput)" in report
    assert "- Build: AppBuild (in: SourceOutput, out: BuildOutput)" in report
    assert "- Deploy: EcsDeployAction (in: BuildOutput, out: -)" in report
    assert "## Known limitations" in report


def test_validate_rejects_duplicate_producer() -> None:
    source_stage, build_stage, deploy_stage = assembler.assemble(_cfg()).stages
    again = StageSpec(name="Source2", actions=source_stage.actions)

    with pytest.raises(ValueError) as excinfo:
        assembler.validate_stages([source_stage, again, build_stage, deploy_stage])

    assert "SourceOutput" in str(excinfo.value)


def test_validate_rejects_empty_stage() -> None:
    source_stage, _, _ = assembler.assemble(_cfg()).stages

    with pytest.raises(ValueError) as excinfo:
        assembler.validate_stages([source_stage, StageSpec(name="Build", actions=())])

    assert "Build" in str(excinfo.value)


def test_validate_rejects_unknown_action_type() -> None:
    source_stage, _, _ = assembler.assemble(_cfg()).stages
    foreign = SimpleNamespace(action_name="Manual", input=Artifact("SourceOutput"))

    with pytest.raises(TypeError):
        assembler.validate_stages([source_stage, StageSpec(name="Approve", actions=(foreign,))])  # type: ignore[arg-type]
