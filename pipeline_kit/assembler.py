from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .actions import build_build_action, build_deploy_action, build_source_action
from .build_project import build_build_project
from .compute_service import build_compute_service
from .config import PipelineConfig
from .logging_utils import get_logger
from .network import build_network
from .registry import build_registry
from .specs import (
    ActionSpec,
    Artifact,
    BuildActionSpec,
    DeployActionSpec,
    PipelineSpec,
    SecretRef,
    SourceActionSpec,
    StageSpec,
)


logger = get_logger(__name__)

# 고정된 단계 순서
STAGE_NAMES: List[str] = ["Source", "Build", "Deploy"]

PLACEHOLDER_IMAGE_NOTICE = (
    "컴퓨트 서비스는 placeholder 이미지({image})로 처음 생성됩니다. "
    "실제 이미지는 파이프라인이 처음 성공한 뒤에 만들어지며, "
    "placeholder 의 task definition 은 자동으로 제거되지 않습니다."
)
TEARDOWN_NOTICE = (
    "스택을 삭제해도 레지스트리({registry})와 task definition 은 남습니다. "
    "다시 배포하기 전에 수동으로 삭제해야 합니다."
)


def _consumed(action: ActionSpec) -> List[Artifact]:
    if isinstance(action, (BuildActionSpec, DeployActionSpec)):
        return [action.input]
    if isinstance(action, SourceActionSpec):
        return []
    raise TypeError(f"알 수 없는 액션 타입입니다: {type(action).__name__}")


def _produced(action: ActionSpec) -> List[Artifact]:
    if isinstance(action, SourceActionSpec):
        return [action.output]
    if isinstance(action, BuildActionSpec):
        return list(action.outputs)
    if isinstance(action, DeployActionSpec):
        return []
    raise TypeError(f"알 수 없는 액션 타입입니다: {type(action).__name__}")


def validate_stages(stages: Sequence[StageSpec]) -> None:
    """
    단계 간 Artifact 흐름을 검증한다.

    - 단계 이름은 중복될 수 없다.
    - 각 Artifact 는 정확히 하나의 액션이 만든다.
    - 소비되는 Artifact 는 앞선 단계에서 이미 만들어졌어야 한다.
    - 각 Artifact 는 최대 하나의 액션만 소비한다.

    알 수 없는 액션 타입은 TypeError 로 거부한다.
    """
    seen_stages: set[str] = set()
    producers: Dict[Artifact, str] = {}
    consumers: Dict[Artifact, str] = {}

    for stage in stages:
        if stage.name in seen_stages:
            raise ValueError(f"단계 이름이 중복되었습니다: {stage.name}")
        seen_stages.add(stage.name)

        if not stage.actions:
            raise ValueError(f"액션이 없는 단계입니다: {stage.name}")

        # 같은 단계 안의 액션은 서로의 출력을 볼 수 없으므로 소비 검사를 먼저 한다.
        for action in stage.actions:
            for artifact in _consumed(action):
                if artifact not in producers:
                    raise ValueError(
                        f"{stage.name}/{action.action_name} 가 읽는 Artifact "
                        f"'{artifact.name}' 는 앞선 단계에서 만들어지지 않았습니다."
                    )
                if artifact in consumers:
                    raise ValueError(
                        f"Artifact '{artifact.name}' 를 이미 {consumers[artifact]} 가 읽고 있습니다."
                    )
                consumers[artifact] = f"{stage.name}/{action.action_name}"

        for action in stage.actions:
            for artifact in _produced(action):
                if artifact in producers:
                    raise ValueError(
                        f"Artifact '{artifact.name}' 를 {producers[artifact]} 와 "
                        f"{stage.name}/{action.action_name} 가 모두 만듭니다."
                    )
                producers[artifact] = f"{stage.name}/{action.action_name}"


def assemble(cfg: PipelineConfig) -> PipelineSpec:
    """
    설정 하나로 Source → Build → Deploy 파이프라인 정의를 조립한다.

    외부 호출은 하지 않으며, 같은 설정이면 항상 같은 PipelineSpec 을 돌려준다.
    """
    logger.debug("파이프라인 조립 시작: %s", cfg.pipeline_name)

    network = build_network(cfg.vpc_cidr, cfg.max_azs)
    registry = build_registry(cfg.app_name, cfg.registry_host)
    project = build_build_project(
        cfg.build_project_name,
        registry,
        cfg.app_name,
        build_image=cfg.build_image,
    )

    source_action = build_source_action(
        SecretRef(cfg.source_token_secret),
        owner=cfg.source_owner,
        repo=cfg.source_repo,
        branch=cfg.source_branch,
    )
    build_action, build_output = build_build_action(project, source_action.output)

    service = build_compute_service(
        network,
        registry,
        image=cfg.placeholder_image,
        cpu=cfg.task_cpu,
        memory_mib=cfg.task_memory_mib,
        container_port=cfg.container_port,
        assign_public_ip=cfg.assign_public_ip,
    )
    deploy_action = build_deploy_action(service, build_output)

    stages = (
        StageSpec(name="Source", actions=(source_action,)),
        StageSpec(name="Build", actions=(build_action,)),
        StageSpec(name="Deploy", actions=(deploy_action,)),
    )
    validate_stages(stages)

    notices = (
        PLACEHOLDER_IMAGE_NOTICE.format(image=service.image),
        TEARDOWN_NOTICE.format(registry=registry.uri),
    )

    return PipelineSpec(name=cfg.pipeline_name, stages=stages, notices=notices)


def _artifact_names(artifacts: Iterable[Artifact]) -> str:
    names = [a.name for a in artifacts]
    return ", ".join(names) if names else "-"


def plan_pipeline(cfg: PipelineConfig, pipeline: PipelineSpec) -> str:
    """
    현재 설정과 조립된 단계 구성을 요약 텍스트로 돌려준다. 외부 호출은 하지 않는다.
    """
    lines: List[str] = []
    lines.append("# Pipeline plan")
    lines.append(f"- pipeline: {pipeline.name}")
    lines.append(f"- source: {cfg.source_owner}/{cfg.source_repo}@{cfg.source_branch}")
    lines.append("")

    # 주요 설정 요약
    lines.append("## Config summary")
    lines.append(f"- app_name: {cfg.app_name}")
    lines.append(f"- registry_host: {cfg.registry_host}")
    lines.append(f"- source_token_secret: {cfg.source_token_secret}")
    lines.append(f"- vpc_cidr: {cfg.vpc_cidr} (max_azs={cfg.max_azs})")
    lines.append(f"- build_project: {cfg.build_project_name} ({cfg.build_image})")
    lines.append(f"- placeholder_image: {cfg.placeholder_image}")
    lines.append(
        f"- task: cpu={cfg.task_cpu} memory={cfg.task_memory_mib} "
        f"port={cfg.container_port} public_ip={cfg.assign_public_ip}"
    )
    lines.append(f"- definition_bucket: {cfg.definition_bucket or '(not set)'}")
    lines.append("")

    lines.append("## Stages")
    for stage in pipeline.stages:
        for action in stage.actions:
            lines.append(
                f"- {stage.name}: {action.action_name} "
                f"(in: {_artifact_names(_consumed(action))}, "
                f"out: {_artifact_names(_produced(action))})"
            )

    lines.append("")
    lines.append("## Known limitations")
    for notice in pipeline.notices:
        lines.append(f"- {notice}")

    return "\n".join(lines)
