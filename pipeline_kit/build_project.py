"""
build_project
-------------

빌드 프로젝트와 빌드 스펙(phases/commands/artifacts) 정의.

레지스트리 URI 는 명령 문자열에 직접 끼워 넣지 않고 ECR_REPO 환경변수로만 전달한다.
이미지 정의 파일(imagedefinitions.json)은 JSON 인코더로 만든 뒤 하나의 셸 인자로
quote 하므로, app_name 에 따옴표나 역슬래시가 있어도 결과 파일은 항상 유효한 JSON 이다.
"""

from __future__ import annotations

import json
import shlex

from .config import DEFAULT_BUILD_IMAGE
from .specs import BuildPhase, BuildProjectSpec, BuildSpec, RegistrySpec


BUILDSPEC_VERSION = "0.2"
IMAGE_DEFINITIONS_FILE = "imagedefinitions.json"
REGISTRY_ENV_VAR = "ECR_REPO"

REGISTRY_POWER_USER_POLICY = "AmazonEC2ContainerRegistryPowerUser"

CACHE_DOCKER_LAYER = "LOCAL_DOCKER_LAYER_CACHE"
CACHE_CUSTOM = "LOCAL_CUSTOM_CACHE"


def image_definitions(app_name: str, registry_uri: str) -> str:
    """
    Deploy 단계가 읽는 이미지 정의 파일 내용.

    형식: [{"name": <app_name>, "imageUri": "<registry_uri>:latest"}]
    """
    return json.dumps([{"name": app_name, "imageUri": f"{registry_uri}:latest"}])


def build_build_spec(registry_uri: str, app_name: str) -> BuildSpec:
    """
    레지스트리 로그인 → docker build/tag/push → 이미지 정의 파일 생성 순서의 BuildSpec.
    """
    repo = f"${REGISTRY_ENV_VAR}"
    definitions = shlex.quote(image_definitions(app_name, registry_uri))

    phases = (
        BuildPhase(
            name="install",
            commands=("echo Installing build dependencies",),
            finally_commands=("echo Done installing deps",),
        ),
        BuildPhase(
            name="pre_build",
            commands=(
                "echo Logging in to the container registry...",
                f"aws ecr get-login-password | docker login --username AWS --password-stdin ${{{REGISTRY_ENV_VAR}%%/*}}",
                "COMMIT_HASH=$(echo $CODEBUILD_RESOLVED_SOURCE_VERSION | cut -c 1-7)",
                "IMAGE_TAG=${COMMIT_HASH:=latest}",
            ),
        ),
        BuildPhase(
            name="build",
            commands=(
                f"echo Building Docker Image {repo}:latest",
                f"docker build -t {repo}:latest .",
                f"echo Tagging Docker Image {repo}:latest with {repo}:$IMAGE_TAG",
                f"docker tag {repo}:latest {repo}:$IMAGE_TAG",
                f"echo Pushing Docker Image to {repo}:latest and {repo}:$IMAGE_TAG",
                f"docker push {repo}:latest",
                f"docker push {repo}:$IMAGE_TAG",
            ),
            finally_commands=("echo Done building code",),
        ),
        BuildPhase(
            name="post_build",
            commands=(
                f"echo creating {IMAGE_DEFINITIONS_FILE} dynamically",
                f"printf '%s' {definitions} > {IMAGE_DEFINITIONS_FILE}",
                "echo Build completed on `date`",
            ),
        ),
    )

    return BuildSpec(
        version=BUILDSPEC_VERSION,
        env=((REGISTRY_ENV_VAR, registry_uri),),
        phases=phases,
        artifact_files=(IMAGE_DEFINITIONS_FILE,),
    )


def build_build_project(
    name: str,
    registry: RegistrySpec,
    app_name: str,
    build_image: str = DEFAULT_BUILD_IMAGE,
) -> BuildProjectSpec:
    # 빌드 안에서 docker 를 돌리므로 privileged 가 꺼져 있으면 빌드가 실패한다.
    spec = build_build_spec(registry.uri, app_name)
    return BuildProjectSpec(
        name=name,
        build_image=build_image,
        privileged=True,
        environment_variables=spec.env,
        build_spec=spec,
        cache_modes=(CACHE_DOCKER_LAYER, CACHE_CUSTOM),
        managed_policies=(REGISTRY_POWER_USER_POLICY,),
    )
