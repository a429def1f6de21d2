"""
registry
--------

컨테이너 이미지 레지스트리(리포지토리) 정의.

이름 규칙(소문자, 길이 등)은 외부 레지스트리가 검사하므로 여기서는 검증하지 않는다.
잘못된 이름은 정의를 제출하는 시점에 설정 오류로 드러난다.
"""

from __future__ import annotations

from .specs import RegistrySpec


def registry_uri(host: str, name: str) -> str:
    return f"{host.rstrip('/')}/{name}"


def build_registry(name: str, host: str) -> RegistrySpec:
    """
    논리 이름과 레지스트리 호스트로 RegistrySpec 을 만든다.

    같은 입력이면 항상 같은 URI 가 나온다.
    """
    return RegistrySpec(name=name, uri=registry_uri(host, name))
