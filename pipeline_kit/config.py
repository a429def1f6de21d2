from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass
from typing import Optional, List

from dotenv import load_dotenv


ENV_FILES_DEFAULT_ORDER = [".env", ".env.pipeline", ".env.secrets"]

DEFAULT_PLACEHOLDER_IMAGE = "okaycloud/dummywebserver:latest"
DEFAULT_BUILD_IMAGE = "aws/codebuild/java:openjdk-8"


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y"}


def _get_int(name: str, default: int, invalid: List[str]) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        invalid.append(f"{name}={raw!r}")
        return default


@dataclass
class PipelineConfig:
    # 필수 공통
    app_name: str
    source_owner: str
    source_repo: str
    registry_host: str

    # 소스
    source_branch: str = "master"
    source_token_secret: str = "github-oauth-token"
    secret_project_id: Optional[str] = None

    # 네트워크
    vpc_cidr: str = "10.0.0.0/16"
    max_azs: int = 2

    # 파이프라인 / 빌드
    pipeline_name: str = "my_pipeline"
    build_project_name: str = "my-codepipeline"
    build_image: str = DEFAULT_BUILD_IMAGE

    # 컴퓨트 서비스
    placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE
    container_port: int = 8080
    task_cpu: int = 256
    task_memory_mib: int = 512
    assign_public_ip: bool = True

    # 정의 파일 업로드 (publish)
    definition_bucket: Optional[str] = None
    definition_prefix: Optional[str] = None
    definition_project_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        # 필수값
        missing: List[str] = []
        invalid: List[str] = []

        def req(name: str) -> str:
            val = os.getenv(name)
            if not val:
                missing.append(name)
            return val or ""

        cfg = cls(
            app_name=req("APP_NAME"),
            source_owner=req("SOURCE_OWNER"),
            source_repo=req("SOURCE_REPO"),
            registry_host=req("REGISTRY_HOST"),
            source_branch=os.getenv("SOURCE_BRANCH") or "master",
            source_token_secret=os.getenv("SOURCE_TOKEN_SECRET", "github-oauth-token"),
            secret_project_id=os.getenv("SECRET_PROJECT_ID"),
            vpc_cidr=os.getenv("VPC_CIDR") or "10.0.0.0/16",
            max_azs=_get_int("MAX_AZS", 2, invalid),
            pipeline_name=os.getenv("PIPELINE_NAME") or "my_pipeline",
            build_project_name=os.getenv("BUILD_PROJECT_NAME") or "my-codepipeline",
            build_image=os.getenv("BUILD_IMAGE") or DEFAULT_BUILD_IMAGE,
            placeholder_image=os.getenv("PLACEHOLDER_IMAGE") or DEFAULT_PLACEHOLDER_IMAGE,
            container_port=_get_int("CONTAINER_PORT", 8080, invalid),
            task_cpu=_get_int("TASK_CPU", 256, invalid),
            task_memory_mib=_get_int("TASK_MEMORY_MIB", 512, invalid),
            assign_public_ip=_get_bool("ASSIGN_PUBLIC_IP", True),
            definition_bucket=os.getenv("DEFINITION_BUCKET"),
            definition_prefix=os.getenv("DEFINITION_PREFIX"),
            definition_project_id=os.getenv("DEFINITION_PROJECT_ID"),
        )

        if missing:
            raise ValueError(
                "필수 환경변수가 누락되었습니다: " + ", ".join(sorted(set(missing)))
            )
        if invalid:
            raise ValueError(
                "정수 값이어야 하는 환경변수가 잘못되었습니다: " + ", ".join(invalid)
            )

        # 자격 증명 참조는 비워둘 수 없다 (값 자체는 Secret Manager 에만 존재)
        if not cfg.source_token_secret.strip():
            raise ValueError("SOURCE_TOKEN_SECRET 는 빈 값일 수 없습니다.")

        try:
            ipaddress.ip_network(cfg.vpc_cidr)
        except ValueError as e:
            raise ValueError(f"VPC_CIDR 값이 올바른 CIDR 이 아닙니다: {cfg.vpc_cidr!r}") from e

        return cfg
