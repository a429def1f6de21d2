"""
compute_service
---------------

로드밸런서 뒤에서 도는 컨테이너 서비스 정의.

실제 이미지는 파이프라인이 처음 성공한 뒤에야 레지스트리에 생기므로,
서비스는 항상 placeholder 이미지로 먼저 선언된다. 이후 Deploy 액션이
이미지 정의 파일을 읽어 실행 중인 이미지를 교체한다.
placeholder 의 task definition 은 교체 후에도 자동으로 정리되지 않는다.
"""

from __future__ import annotations

from typing import Optional

from .build_project import REGISTRY_POWER_USER_POLICY
from .config import DEFAULT_PLACEHOLDER_IMAGE
from .logging_utils import get_logger
from .specs import ComputeServiceSpec, NetworkSpec, RegistrySpec


logger = get_logger(__name__)


def build_compute_service(
    network: NetworkSpec,
    registry: RegistrySpec,
    *,
    image: str = DEFAULT_PLACEHOLDER_IMAGE,
    cpu: int = 256,
    memory_mib: int = 512,
    container_port: int = 8080,
    assign_public_ip: bool = True,
    name: Optional[str] = None,
) -> ComputeServiceSpec:
    """
    network 와 registry 를 묶어 ComputeServiceSpec 을 만든다.

    image 는 bootstrap 용 placeholder 이며 비워둘 수 없다.
    컨테이너 이름은 Deploy 단계의 이미지 정의 파일과 맞추기 위해 registry.name 을 쓴다.
    """
    if not image:
        raise ValueError("컴퓨트 서비스에는 placeholder 이미지가 필요합니다.")
    if cpu <= 0 or memory_mib <= 0:
        raise ValueError(f"cpu/memory 는 양수여야 합니다: cpu={cpu} memory={memory_mib}")
    if not 0 < container_port < 65536:
        raise ValueError(f"컨테이너 포트 범위를 벗어났습니다: {container_port}")

    logger.debug("컴퓨트 서비스 정의: registry=%s image=%s", registry.uri, image)

    return ComputeServiceSpec(
        name=name or f"{registry.name}-service",
        container_name=registry.name,
        image=image,
        cpu=cpu,
        memory_mib=memory_mib,
        container_port=container_port,
        assign_public_ip=assign_public_ip,
        network=network,
        registry=registry,
        managed_policies=(REGISTRY_POWER_USER_POLICY,),
    )
