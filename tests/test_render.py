import json
import os

import yaml

from pipeline_kit import assembler, render
from pipeline_kit.config import PipelineConfig


def _cfg() -> PipelineConfig:
    return PipelineConfig(
        app_name="payslip-app-cdk",
        source_owner="KierenMartin",
        source_repo="employee-pay-slip",
        registry_host="123456789012.dkr.ecr.us-east-1.amazonaws.com",
        source_token_secret="github-oauth-token",
    )


def test_pipeline_document_shape() -> None:
    doc = render.pipeline_document(assembler.assemble(_cfg()))

    assert doc["pipelineName"] == "my_pipeline"
    assert [s["stageName"] for s in doc["stages"]] == ["Source", "Build", "Deploy"]
    assert doc["stages"][1]["actions"][0]["inputs"] == ["SourceOutput"]
    assert doc["stages"][2]["actions"][0]["inputs"] == ["BuildOutput"]

    service = doc["resources"]["computeServices"]["payslip-app-cdk-service"]
    assert service["taskImageOptions"]["containerPort"] == 8080
    assert service["registry"]["removalPolicy"] == "RETAIN"

    project = doc["resources"]["buildProjects"]["my-codepipeline"]
    assert project["environment"]["privileged"] is True


def test_secret_is_rendered_as_reference() -> None:
    doc = render.pipeline_document(assembler.assemble(_cfg()))

    source = doc["stages"][0]["actions"][0]
    assert source["oauthToken"] == {"secretRef": "github-oauth-token", "version": "latest"}


def test_rendered_documents_are_identical_for_same_config() -> None:
    first = json.dumps(render.pipeline_document(assembler.assemble(_cfg())), sort_keys=True)
    second = json.dumps(render.pipeline_document(assembler.assemble(_cfg())), sort_keys=True)

    assert first == second


def test_buildspec_yaml_keeps_phase_order() -> None:
    pipeline = assembler.assemble(_cfg())
    spec = pipeline.stages[1].actions[0].project.build_spec

    loaded = yaml.safe_load(render.render_buildspec(spec))

    assert loaded["version"] == "0.2"
    assert list(loaded["phases"]) == ["install", "pre_build", "build", "post_build"]
    assert loaded["artifacts"]["files"] == ["imagedefinitions.json"]
    assert loaded["env"]["variables"]["ECR_REPO"].endswith("/payslip-app-cdk")
    assert loaded["phases"]["build"]["finally"] == ["echo Done building code"]


def test_write_definition_creates_files(tmp_path) -> None:
    paths = render.write_definition(assembler.assemble(_cfg()), str(tmp_path / "out"))

    assert [os.path.basename(p) for p in paths] == ["pipeline.json", "buildspec.yml"]
    with open(paths[0], encoding="utf-8") as f:
        assert json.load(f)["pipelineName"] == "my_pipeline"
    with open(paths[1], encoding="utf-8") as f:
        assert "phases" in yaml.safe_load(f)
