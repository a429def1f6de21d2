"""
render
------

조립된 PipelineSpec 을 외부 오케스트레이션 플랫폼에 넘길 파일로 직렬화한다.

- pipeline.json : 전체 리소스 그래프 (camelCase 키)
- buildspec.yml : 빌드 실행기가 읽는 빌드 스펙

Secret 은 참조(secretRef)로만 기록되고 값은 어디에도 쓰지 않는다.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List

import yaml

from .logging_utils import get_logger
from .specs import (
    ActionSpec,
    BuildActionSpec,
    BuildProjectSpec,
    BuildSpec,
    ComputeServiceSpec,
    DeployActionSpec,
    PipelineSpec,
    SourceActionSpec,
)


logger = get_logger(__name__)

PIPELINE_FILE = "pipeline.json"
BUILDSPEC_FILE = "buildspec.yml"


def buildspec_document(spec: BuildSpec) -> Dict[str, Any]:
    phases: Dict[str, Any] = {}
    for phase in spec.phases:
        body: Dict[str, Any] = {
            "on-failure": phase.on_failure,
            "commands": list(phase.commands),
        }
        if phase.finally_commands:
            body["finally"] = list(phase.finally_commands)
        phases[phase.name] = body

    return {
        "version": spec.version,
        "env": {"variables": dict(spec.env)},
        "phases": phases,
        "artifacts": {"files": list(spec.artifact_files)},
    }


def render_buildspec(spec: BuildSpec) -> str:
    # phase 순서가 곧 실행 순서이므로 정렬하지 않는다.
    return yaml.safe_dump(buildspec_document(spec), sort_keys=False, default_flow_style=False)


def _project_document(project: BuildProjectSpec) -> Dict[str, Any]:
    return {
        "name": project.name,
        "environment": {
            "buildImage": project.build_image,
            "privileged": project.privileged,
        },
        "environmentVariables": {k: {"value": v} for k, v in project.environment_variables},
        "cache": list(project.cache_modes),
        "managedPolicies": list(project.managed_policies),
        "buildSpec": buildspec_document(project.build_spec),
    }


def _service_document(service: ComputeServiceSpec) -> Dict[str, Any]:
    return {
        "name": service.name,
        "network": {"cidr": service.network.cidr, "maxAzs": service.network.max_azs},
        "registry": {
            "name": service.registry.name,
            "uri": service.registry.uri,
            "removalPolicy": service.registry.removal_policy,
        },
        "cpu": service.cpu,
        "memoryLimitMiB": service.memory_mib,
        "desiredCount": service.desired_count,
        "assignPublicIp": service.assign_public_ip,
        "loadBalancer": {
            "enabled": service.load_balanced,
            "listenerPort": service.listener_port,
        },
        "taskImageOptions": {
            "containerName": service.container_name,
            "image": service.image,
            "containerPort": service.container_port,
        },
        "managedPolicies": list(service.managed_policies),
    }


def _action_document(action: ActionSpec) -> Dict[str, Any]:
    if isinstance(action, SourceActionSpec):
        return {
            "actionName": action.action_name,
            "provider": "GitHub",
            "owner": action.owner,
            "repo": action.repo,
            "branch": action.branch,
            "oauthToken": {
                "secretRef": action.credentials.name,
                "version": action.credentials.version,
            },
            "outputs": [action.output.name],
        }
    if isinstance(action, BuildActionSpec):
        return {
            "actionName": action.action_name,
            "provider": "Build",
            "project": action.project.name,
            "inputs": [action.input.name],
            "outputs": [a.name for a in action.outputs],
        }
    if isinstance(action, DeployActionSpec):
        return {
            "actionName": action.action_name,
            "provider": "ContainerService",
            "service": action.service.name,
            "inputs": [action.input.name],
        }
    raise TypeError(f"알 수 없는 액션 타입입니다: {type(action).__name__}")


def pipeline_document(pipeline: PipelineSpec) -> Dict[str, Any]:
    """
    PipelineSpec 전체를 JSON 으로 직렬화 가능한 dict 로 바꾼다.

    빌드 프로젝트와 컴퓨트 서비스는 액션 안에 중복해서 넣지 않고
    최상위 resources 에 한 번씩만 기록한다.
    """
    projects: Dict[str, Any] = {}
    services: Dict[str, Any] = {}
    stages: List[Dict[str, Any]] = []

    for stage in pipeline.stages:
        actions = []
        for action in stage.actions:
            if isinstance(action, BuildActionSpec):
                projects[action.project.name] = _project_document(action.project)
            elif isinstance(action, DeployActionSpec):
                services[action.service.name] = _service_document(action.service)
            actions.append(_action_document(action))
        stages.append({"stageName": stage.name, "actions": actions})

    return {
        "pipelineName": pipeline.name,
        "resources": {
            "buildProjects": projects,
            "computeServices": services,
        },
        "stages": stages,
        "notices": list(pipeline.notices),
    }


def write_definition(pipeline: PipelineSpec, out_dir: str) -> List[str]:
    """
    out_dir 에 pipeline.json 과 buildspec.yml 을 쓰고 경로 목록을 돌려준다.
    """
    os.makedirs(out_dir, exist_ok=True)

    paths: List[str] = []
    pipeline_path = os.path.join(out_dir, PIPELINE_FILE)
    with open(pipeline_path, "w", encoding="utf-8") as f:
        json.dump(pipeline_document(pipeline), f, indent=2, ensure_ascii=False)
        f.write("\n")
    paths.append(pipeline_path)

    build_specs = [
        action.project.build_spec
        for stage in pipeline.stages
        for action in stage.actions
        if isinstance(action, BuildActionSpec)
    ]
    if build_specs:
        buildspec_path = os.path.join(out_dir, BUILDSPEC_FILE)
        with open(buildspec_path, "w", encoding="utf-8") as f:
            f.write(render_buildspec(build_specs[0]))
        paths.append(buildspec_path)

    for path in paths:
        logger.info("정의 파일을 썼습니다: %s", path)
    return paths
