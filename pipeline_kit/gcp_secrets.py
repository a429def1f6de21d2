"""
gcp_secrets
-----------

Source 액션이 참조하는 자격 증명 secret 을 Secret Manager 에서 읽기 전용으로 점검하는 모듈.

정의 파일에는 secret 이름만 들어가며, 여기서 읽은 값은 존재/비어 있음 판단에만 쓰고
로그나 반환값에 절대 남기지 않는다.
"""

from __future__ import annotations

from google.api_core.exceptions import GoogleAPICallError, NotFound, PermissionDenied
from google.cloud import secretmanager

from .config import PipelineConfig
from .logging_utils import get_logger
from .specs import SecretRef


logger = get_logger(__name__)


def secret_version_name(project_id: str, ref: SecretRef) -> str:
    return f"projects/{project_id}/secrets/{ref.name}/versions/{ref.version}"


def check_secret(cfg: PipelineConfig) -> str:
    """
    SOURCE_TOKEN_SECRET 가 가리키는 secret 버전을 읽어 상태 문자열을 돌려준다.
    (없어도 생성하지 않는다)
    """
    if not cfg.secret_project_id:
        return "Secrets: SECRET_PROJECT_ID 가 설정되지 않아 확인 불가"

    ref = SecretRef(cfg.source_token_secret)
    name = secret_version_name(cfg.secret_project_id, ref)
    logger.info("자격 증명 secret 확인: %s", name)

    client = secretmanager.SecretManagerServiceClient()
    try:
        response = client.access_secret_version(name=name)
    except NotFound:
        return f"Secrets: 없음 (생성이 필요함) ({name})"
    except PermissionDenied:
        return f"Secrets: 접근 권한이 없어 확인 불가 ({name})"
    except GoogleAPICallError as e:
        return f"Secrets: 조회 실패 ({name}, {e.__class__.__name__})"

    if not response.payload.data:
        return f"Secrets: 값이 비어 있음 ({name})"
    return f"Secrets: 존재함 ({name})"
