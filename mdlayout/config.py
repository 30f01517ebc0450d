from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import Align


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='MDLAYOUT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    app_name: str = 'mdlayout'
    log_level: str = Field(
        default='INFO',
        validation_alias=AliasChoices('MDLAYOUT_LOG_LEVEL', 'LOG_LEVEL'),
    )

    # PDF export
    pdf_font_name: str = 'Helvetica'
    # Optional TrueType faces registered under pdf_font_name
    pdf_font_path: Path | None = None
    pdf_bold_font_path: Path | None = None
    pdf_italic_font_path: Path | None = None
    pdf_bold_italic_font_path: Path | None = None
    pdf_font_size: float = Field(default=11.0, gt=0)
    pdf_line_spacing: float = Field(default=1.4, gt=0)
    pdf_page_margin: float = Field(default=48.0, ge=0)
    pdf_bottom_margin: float = Field(default=20.0, ge=0)
    pdf_align: Align = Align.left
    pdf_title: str = 'Markdown Document'

    def pdf_line_height(self, font_size: float | None = None) -> float:
        return float(font_size or self.pdf_font_size) * self.pdf_line_spacing


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
