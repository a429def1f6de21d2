"""
network
-------

파이프라인이 배포하는 서비스가 올라갈 네트워크(VPC) 정의.
"""

from __future__ import annotations

import ipaddress

from .specs import NetworkSpec


def build_network(cidr: str = "10.0.0.0/16", max_azs: int = 2) -> NetworkSpec:
    """
    CIDR 과 최대 AZ 수로 NetworkSpec 을 만든다.

    잘못된 CIDR 이나 1 미만의 AZ 수는 정의 단계에서 바로 ValueError 로 거부한다.
    """
    try:
        network = ipaddress.ip_network(cidr)
    except ValueError as e:
        raise ValueError(f"올바른 CIDR 이 아닙니다: {cidr!r}") from e

    if max_azs < 1:
        raise ValueError(f"max_azs 는 1 이상이어야 합니다: {max_azs}")

    return NetworkSpec(cidr=str(network), max_azs=max_azs)
