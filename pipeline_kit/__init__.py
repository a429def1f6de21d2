"""
pipeline_kit
------------

Source → Build → Deploy 지속 배포 파이프라인 정의를 조립하는 CLI 패키지.
네트워크, 컨테이너 레지스트리, 빌드 프로젝트, 컨테이너 서비스, 파이프라인 단계를
환경변수 기반 설정 하나로 선언하고, 외부 오케스트레이션 플랫폼에 넘길 정의 파일을 만든다.
"""

__all__ = [
    "config",
    "assembler",
    "orchestrator",
]
