"""
specs
-----

파이프라인 정의를 구성하는 설정 레코드 모음.

모든 레코드는 한 번 생성된 뒤 바뀌지 않는(frozen) 값 객체이며,
동작은 전부 각 모듈의 함수(build_* / assemble / render)에 둔다.
시퀀스 필드는 tuple 을 사용하므로 같은 입력으로 만든 두 정의는 == 로 비교된다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


ON_FAILURE_ABORT = "ABORT"
ON_FAILURE_CONTINUE = "CONTINUE"

REMOVAL_POLICY_RETAIN = "RETAIN"


@dataclass(frozen=True)
class NetworkSpec:
    cidr: str
    max_azs: int


@dataclass(frozen=True)
class RegistrySpec:
    name: str
    uri: str
    # 스택을 내려도 레지스트리는 남는다 (수동 삭제 필요)
    removal_policy: str = REMOVAL_POLICY_RETAIN


@dataclass(frozen=True)
class BuildPhase:
    """
    빌드 단계 하나.

    commands 는 선언 순서대로 실행되며, 하나라도 non-zero 로 끝나면 단계가 중단된다.
    on_failure=ABORT 이면 이후 단계도 실행되지 않는다.
    """

    name: str
    commands: Tuple[str, ...]
    finally_commands: Tuple[str, ...] = ()
    on_failure: str = ON_FAILURE_ABORT


@dataclass(frozen=True)
class BuildSpec:
    version: str
    env: Tuple[Tuple[str, str], ...]
    phases: Tuple[BuildPhase, ...]
    artifact_files: Tuple[str, ...]


@dataclass(frozen=True)
class BuildProjectSpec:
    name: str
    build_image: str
    privileged: bool
    environment_variables: Tuple[Tuple[str, str], ...]
    build_spec: BuildSpec
    cache_modes: Tuple[str, ...] = ()
    managed_policies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SecretRef:
    """Secret 저장소 안의 이름만 가리킨다. 값은 절대 담지 않는다."""

    name: str
    version: str = "latest"


@dataclass(frozen=True)
class Artifact:
    name: str


@dataclass(frozen=True)
class SourceActionSpec:
    action_name: str
    owner: str
    repo: str
    branch: str
    credentials: SecretRef
    output: Artifact


@dataclass(frozen=True)
class BuildActionSpec:
    action_name: str
    project: BuildProjectSpec
    input: Artifact
    outputs: Tuple[Artifact, ...]


@dataclass(frozen=True)
class ComputeServiceSpec:
    name: str
    container_name: str
    image: str
    cpu: int
    memory_mib: int
    container_port: int
    assign_public_ip: bool
    network: NetworkSpec
    registry: RegistrySpec
    desired_count: int = 1
    load_balanced: bool = True
    listener_port: int = 80
    managed_policies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DeployActionSpec:
    action_name: str
    service: ComputeServiceSpec
    input: Artifact


ActionSpec = Union[SourceActionSpec, BuildActionSpec, DeployActionSpec]


@dataclass(frozen=True)
class StageSpec:
    name: str
    actions: Tuple[ActionSpec, ...]


@dataclass(frozen=True)
class PipelineSpec:
    name: str
    stages: Tuple[StageSpec, ...]
    notices: Tuple[str, ...] = ()
