from __future__ import annotations

from typing import List

from .config import PipelineConfig
from .logging_utils import get_logger
from . import assembler, render, gcp_secrets, gcp_gcs


logger = get_logger(__name__)


def plan_all(cfg: PipelineConfig) -> str:
    """
    정의를 조립해서 요약 텍스트를 돌려준다. 외부 호출은 하지 않는다.
    """
    pipeline = assembler.assemble(cfg)
    return assembler.plan_pipeline(cfg, pipeline)


def synth_all(cfg: PipelineConfig, out_dir: str) -> List[str]:
    """
    정의를 조립해서 out_dir 에 파일로 쓴다.

    알려진 제약(placeholder 이미지, 수동 정리 대상)은 경고 로그로 남긴다.
    """
    pipeline = assembler.assemble(cfg)
    for notice in pipeline.notices:
        logger.warning(notice)
    return render.write_definition(pipeline, out_dir)


def publish_all(cfg: PipelineConfig, out_dir: str) -> List[str]:
    paths = synth_all(cfg, out_dir)
    return gcp_gcs.publish_definition(cfg, paths)


def check_all(cfg: PipelineConfig, show_all: bool = False) -> tuple[str, bool]:
    """
    정의를 제출하기 전에 로컬 정의와 외부 리소스 상태를 점검한다.

    Returns:
        summary: 사람이 읽기 좋은 텍스트 요약
        has_issues: 크리티컬 이슈나 경고가 하나라도 있는지 여부
    """
    lines: List[str] = []
    critical: List[str] = []
    warnings: List[str] = []

    lines.append("# Pipeline pre-check")
    lines.append(f"- pipeline: {cfg.pipeline_name}")
    lines.append("")

    # 1) 로컬 정의 조립/검증
    lines.append("## Definition")
    try:
        pipeline = assembler.assemble(cfg)
        status = (
            f"Definition: 조립 성공 ({len(pipeline.stages)} stages: "
            + ", ".join(s.name for s in pipeline.stages)
            + ")"
        )
        if show_all:
            lines.append(f"- {status}")
    except ValueError as e:
        msg = f"Definition: 설정 오류 ({e})"
        if show_all:
            lines.append(f"- {msg}")
        critical.append(msg)

    lines.append("")

    # 2) 자격 증명 secret
    lines.append("## Secret Manager")
    try:
        secret_status = gcp_secrets.check_secret(cfg)
        if show_all:
            lines.append(f"- {secret_status}")
        # Secret 은 우리 패키지가 만들지 않으므로 없거나 비어 있으면 크리티컬
        if "존재함" not in secret_status:
            critical.append(secret_status)
    except Exception as e:  # noqa: BLE001
        msg = f"Secrets: 체크 중 예외 발생: {e}"
        if show_all:
            lines.append(f"- {msg}")
        critical.append(msg)

    lines.append("")

    # 3) 정의 버킷
    lines.append("## GCS")
    try:
        gcs_status = gcp_gcs.check_bucket(cfg)
        if show_all:
            lines.append(f"- {gcs_status}")
        if "버킷 없음" in gcs_status:
            warnings.append(gcs_status)
        elif "조회 실패" in gcs_status:
            critical.append(gcs_status)
    except Exception as e:  # noqa: BLE001
        msg = f"GCS: 체크 중 예외 발생: {e}"
        if show_all:
            lines.append(f"- {msg}")
        critical.append(msg)

    lines.append("")

    # Summary
    lines.append("## Summary")
    if critical:
        lines.append("- 상태: 크리티컬 이슈가 있습니다. 정의 제출 전에 반드시 해결해야 합니다.")
    elif warnings:
        lines.append("- 상태: 경고가 있습니다.")
    else:
        lines.append("- 상태: 주요 이슈 없음 (정의 제출 가능 상태로 보입니다)")

    if show_all or critical:
        lines.append("")
        lines.append("### Critical issues")
        if critical:
            for i in critical:
                lines.append(f"- {i}")
        else:
            lines.append("- (none)")

    if show_all or warnings:
        lines.append("")
        lines.append("### Warnings")
        if warnings:
            for i in warnings:
                lines.append(f"- {i}")
        else:
            lines.append("- (none)")

    if not show_all:
        lines.append("")
        lines.append("자세한 상태를 보려면 `pipeline-kit check -a` 를 실행하세요.")

    summary = "\n".join(lines)
    return summary, bool(critical or warnings)
