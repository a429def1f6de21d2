import os
import sys

import click

from .config import load_env_files, PipelineConfig
from .logging_utils import setup_logging, get_logger
from .orchestrator import check_all, plan_all, publish_all, synth_all


logger = get_logger(__name__)

DEFAULT_OUT_DIR = "pipeline.out"


@click.group()
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="작업 디렉토리 (기본: 현재 디렉토리)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다. (-vv 는 google 클라이언트 로그까지 출력)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="경고 이상의 로그만 출력합니다.",
)
@click.pass_context
def main(ctx: click.Context, chdir: str, verbose: int, quiet: bool) -> None:
    """Source → Build → Deploy 파이프라인 정의 생성 CLI"""
    setup_logging(verbose, quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["chdir"] = chdir
    ctx.obj["verbose"] = verbose


def _load_config_from_ctx(ctx: click.Context) -> PipelineConfig:
    base_dir: str = ctx.obj["chdir"]
    load_env_files(base_dir)
    cfg = PipelineConfig.from_env()
    logger.debug("Config loaded: %s", cfg)
    return cfg


def _resolve_out_dir(ctx: click.Context, out_dir: str) -> str:
    if os.path.isabs(out_dir):
        return out_dir
    return os.path.join(ctx.obj["chdir"], out_dir)


@main.command()
@click.pass_context
def plan(ctx: click.Context) -> None:
    """현재 설정과 단계/Artifact 구성, 알려진 제약을 요약해서 출력"""
    try:
        cfg = _load_config_from_ctx(ctx)
        report = plan_all(cfg)
    except ValueError as e:
        click.echo(f"[ERROR] 설정 오류: {e}", err=True)
        sys.exit(1)

    click.echo(report)


@main.command()
@click.option(
    "-o",
    "--out",
    "out_dir",
    type=str,
    default=DEFAULT_OUT_DIR,
    help=f"정의 파일을 쓸 디렉토리 (기본: {DEFAULT_OUT_DIR})",
)
@click.pass_context
def synth(ctx: click.Context, out_dir: str) -> None:
    """파이프라인 정의(pipeline.json, buildspec.yml)를 파일로 생성"""
    try:
        cfg = _load_config_from_ctx(ctx)
        paths = synth_all(cfg, _resolve_out_dir(ctx, out_dir))
    except ValueError as e:
        click.echo(f"[ERROR] 설정 오류: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        logger.exception("정의 파일 쓰기 실패")
        click.echo(f"[ERROR] 정의 파일 생성 실패: {e}", err=True)
        sys.exit(1)

    for path in paths:
        click.echo(path)


@main.command()
@click.option(
    "-o",
    "--out",
    "out_dir",
    type=str,
    default=DEFAULT_OUT_DIR,
    help=f"업로드 전에 정의 파일을 쓸 디렉토리 (기본: {DEFAULT_OUT_DIR})",
)
@click.pass_context
def publish(ctx: click.Context, out_dir: str) -> None:
    """정의 파일을 생성한 뒤 DEFINITION_BUCKET 에 업로드"""
    try:
        cfg = _load_config_from_ctx(ctx)
    except ValueError as e:
        click.echo(f"[ERROR] 설정 오류: {e}", err=True)
        sys.exit(1)

    try:
        uris = publish_all(cfg, _resolve_out_dir(ctx, out_dir))
    except Exception as e:  # noqa: BLE001
        logger.exception("정의 업로드 중 오류 발생")
        click.echo(f"[ERROR] 업로드 실패: {e}", err=True)
        sys.exit(1)

    for uri in uris:
        click.echo(uri)


@main.command()
@click.option(
    "-a",
    "--all",
    "show_all",
    is_flag=True,
    help="모든 체크 항목의 상세 상태를 출력합니다. (기본은 이슈만 요약)",
)
@click.pass_context
def check(ctx: click.Context, show_all: bool) -> None:
    """
    정의를 제출하기 전에 설정, 자격 증명 secret, 정의 버킷 상태를 점검한다.
    (실제 리소스 생성/변경은 하지 않는다)
    """
    try:
        cfg = _load_config_from_ctx(ctx)
    except ValueError as e:
        click.echo(f"[ERROR] 설정 로드 실패: {e}", err=True)
        sys.exit(1)

    try:
        report, has_issues = check_all(cfg, show_all=show_all)
    except Exception as e:  # noqa: BLE001
        logger.exception("사전 체크 중 오류 발생")
        click.echo(f"[ERROR] 체크 실패: {e}", err=True)
        sys.exit(1)

    click.echo(report)

    # 이슈가 있으면 exit 1 로 종료하여 CI 등에서 감지 가능하게 한다.
    if has_issues:
        sys.exit(1)
