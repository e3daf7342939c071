"""Application configuration via environment variables."""
import logging
from pathlib import Path

from pydantic_settings import BaseSettings

PACKAGE_ROOT = Path(__file__).resolve().parent


class Settings(BaseSettings):
    app_name: str = "Workflow Compiler"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    templates_dir: Path = PACKAGE_ROOT / "templates"
    # Editor node types that only exist for presentation and never reach the engine
    ui_node_types: list[str] = [
        "SetNode",
        "GetNode",
        "Fast Groups Muter (rgthree)",
        "Bookmark (rgthree)",
        "Note",
        "Note Plus (mtb)",
        "PreviewImage",
        "MaraScottDisplayInfo_v2",
    ]
    zero_index_outputs: bool = False
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = {"env_prefix": "WORKFLOW_COMPILER_"}


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
