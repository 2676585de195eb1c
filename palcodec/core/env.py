"""Settings for palcodec, read from the environment and an optional .env file.

Load order (first wins):
  1. Variables already in the OS environment, which are never overwritten.
  2. The file passed as env_file, when given.
  3. The nearest .env above the working directory, searched no higher than
     the enclosing git checkout (a .git file or directory).

Recognised variables:
  PALCODEC_MERGE_BOUNDARY   clamp | strict   (default clamp)
  PALCODEC_PNG_SWATCH_SIZE  swatch edge in pixels for PNG export (default 32)
  PALCODEC_LOG_LEVEL        logging level name for the palcodec logger (default WARNING)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from palcodec.core.errors import ValidationError
from palcodec.core.gradient import BoundaryPolicy

logger = logging.getLogger(__name__)

ENV_FILE_NAME = '.env'


def find_env_file(start: Path) -> Path | None:
    """Nearest .env in start or its parents, or None once a .git boundary is passed."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ENV_FILE_NAME
        if candidate.is_file():
            return candidate
        if (directory / '.git').exists():
            break
    return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        return value[1:-1]
    # unquoted values may carry a trailing comment
    return value.split(' #', 1)[0].rstrip()


def parse_env_file(path: Path) -> dict[str, str]:
    """KEY=value pairs from a .env file.

    Accepts an optional `export ` prefix, single or double quoted values and
    `#` comments. Lines without `=` are ignored.
    """
    values: dict[str, str] = {}
    for number, raw in enumerate(path.read_text(encoding='utf-8').splitlines(), start=1):
        line = raw.strip()
        if line.startswith('export '):
            line = line[len('export ') :].lstrip()
        if not line or line.startswith('#'):
            continue
        key, sep, value = line.partition('=')
        key = key.strip()
        if not sep or not key:
            logger.debug('%s:%d: ignoring line without KEY=value', path, number)
            continue
        values[key] = _unquote(value.strip())
    return values


def load_env(env_file: str | None = None) -> Path | None:
    """Copy .env values into os.environ for keys that are not set yet.

    Returns the file that was read, or None when there was none.
    """
    path = Path(env_file) if env_file else find_env_file(Path.cwd())
    if path is None or not path.is_file():
        return None

    for key, value in parse_env_file(path).items():
        os.environ.setdefault(key, value)
    logger.debug('loaded settings from %s', path)
    return path


@dataclass(frozen=True)
class Settings:
    merge_boundary: BoundaryPolicy = BoundaryPolicy.CLAMP
    png_swatch_size: int = 32
    log_level: str = 'WARNING'


def settings_from_environ(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from an environment mapping (os.environ by default)."""
    env = os.environ if environ is None else environ

    boundary = env.get('PALCODEC_MERGE_BOUNDARY', BoundaryPolicy.CLAMP.value).strip().lower()
    try:
        merge_boundary = BoundaryPolicy(boundary)
    except ValueError as exc:
        raise ValidationError(f'PALCODEC_MERGE_BOUNDARY must be clamp or strict, got {boundary!r}') from exc

    raw_size = env.get('PALCODEC_PNG_SWATCH_SIZE', '32').strip()
    try:
        swatch_size = int(raw_size)
    except ValueError as exc:
        raise ValidationError(f'PALCODEC_PNG_SWATCH_SIZE must be an integer, got {raw_size!r}') from exc
    if swatch_size < 1:
        raise ValidationError('PALCODEC_PNG_SWATCH_SIZE must be at least 1')

    log_level = env.get('PALCODEC_LOG_LEVEL', 'WARNING').strip().upper()
    return Settings(merge_boundary=merge_boundary, png_swatch_size=swatch_size, log_level=log_level)


def load_settings(env_file: str | None = None) -> Settings:
    """Load .env (if any) then read Settings from the environment."""
    load_env(env_file)
    return settings_from_environ()


def configure_logging(settings: Settings) -> None:
    """Set the palcodec logger level. Handlers are left to the application."""
    logging.getLogger('palcodec').setLevel(settings.log_level)
