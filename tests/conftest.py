"""
pytest 설정:

로컬 작업 환경에 설치된 다른 버전의 pipeline_kit 패키지가 존재할 때,
`pytest` 실행 시 site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.

테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.
"""

from __future__ import annotations

import os
import sys

import pytest


# 테스트 환경에 남아 있는 값이 from_env 결과를 바꾸지 않도록 매 테스트마다 지운다.
PIPELINE_ENV_KEYS = [
    "APP_NAME",
    "SOURCE_OWNER",
    "SOURCE_REPO",
    "REGISTRY_HOST",
    "SOURCE_BRANCH",
    "SOURCE_TOKEN_SECRET",
    "SECRET_PROJECT_ID",
    "VPC_CIDR",
    "MAX_AZS",
    "PIPELINE_NAME",
    "BUILD_PROJECT_NAME",
    "BUILD_IMAGE",
    "PLACEHOLDER_IMAGE",
    "CONTAINER_PORT",
    "TASK_CPU",
    "TASK_MEMORY_MIB",
    "ASSIGN_PUBLIC_IP",
    "DEFINITION_BUCKET",
    "DEFINITION_PREFIX",
    "DEFINITION_PROJECT_ID",
]


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


@pytest.fixture(autouse=True)
def _clean_pipeline_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in PIPELINE_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
