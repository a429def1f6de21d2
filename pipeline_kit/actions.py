"""
actions
-------

Source / Build / Deploy 단계에 들어가는 액션 정의.

각 액션은 자신이 읽는 Artifact 와 만드는 Artifact 를 명시적으로 가진다.
"""

from __future__ import annotations

from typing import Tuple

from .specs import (
    Artifact,
    BuildActionSpec,
    BuildProjectSpec,
    ComputeServiceSpec,
    DeployActionSpec,
    SecretRef,
    SourceActionSpec,
)


SOURCE_ACTION_NAME = "my_github_source"
BUILD_ACTION_NAME = "AppBuild"
DEPLOY_ACTION_NAME = "EcsDeployAction"

SOURCE_OUTPUT = "SourceOutput"
BUILD_OUTPUT = "BuildOutput"


def build_source_action(
    credentials: SecretRef,
    owner: str,
    repo: str,
    branch: str = "master",
) -> SourceActionSpec:
    """
    저장소 owner/repo 의 branch 를 구독하는 Source 액션.

    자격 증명은 SecretRef 로만 참조한다.
    """
    if not credentials.name:
        raise ValueError("Source 액션에는 자격 증명 secret 이름이 필요합니다.")

    return SourceActionSpec(
        action_name=SOURCE_ACTION_NAME,
        owner=owner,
        repo=repo,
        branch=branch,
        credentials=credentials,
        output=Artifact(SOURCE_OUTPUT),
    )


def build_build_action(
    project: BuildProjectSpec,
    input_artifact: Artifact,
) -> Tuple[BuildActionSpec, Artifact]:
    output = Artifact(BUILD_OUTPUT)
    action = BuildActionSpec(
        action_name=BUILD_ACTION_NAME,
        project=project,
        input=input_artifact,
        outputs=(output,),
    )
    return action, output


def build_deploy_action(
    service: ComputeServiceSpec,
    input_artifact: Artifact,
) -> DeployActionSpec:
    return DeployActionSpec(
        action_name=DEPLOY_ACTION_NAME,
        service=service,
        input=input_artifact,
    )
