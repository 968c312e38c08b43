from __future__ import annotations

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	SERVICE_NAME: str = "fay-playground"
	PORT: int = 10001
	LOG_LEVEL: str = "INFO"

	# Module roots: MODULES_DIR/<scope>, searched in this order
	MODULES_DIR: str = "modules"
	MODULE_SCOPES: List[str] = ["library", "project", "global"]
	SOURCE_EXTENSION: str = ".hs"

	# Public files; generated scripts and previews go under GEN_DIR
	STATIC_DIR: str = "static"
	GEN_DIR: str = "static/gen"

	# Toolchain
	TYPECHECK_COMMAND: str = "ghc"
	COMPILE_COMMAND: str = "fay"
	INCLUDE_DIRS: List[str] = ["include"]
	GHC_PACKAGE_FLAGS: List[str] = ["-package", "fay", "-package-conf", "cabal-dev/packages-7.4.2.conf"]
	TOOLCHAIN_TIMEOUT: Optional[float] = 60.0

	# Lines injected ahead of checked source; their count is the line-skip offset
	PRELUDE_LINES: List[str] = []

	# Artifact lifecycle
	ARTIFACT_TTL: float = 5.0
	ID_RETRY_DELAY: float = 0.01
	ID_MAX_ATTEMPTS: int = 100

	# Preview page; paths resolve against the /static mount in main.py
	PREVIEW_STYLESHEETS: List[str] = ["/static/css/bootstrap.min.css", "/static/css/gen.css"]
	PREVIEW_SCRIPTS: List[str] = ["/static/js/jquery.js", "/static/js/date.js", "/static/js/gen.js"]

	model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
