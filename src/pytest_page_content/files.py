"""Reference file access."""

from pathlib import Path

from pytest_page_content.errors import ErrorContext, ReferenceFileError


def read_file_content(path: str | Path, encoding: str = 'utf-8') -> str:
    """Read the contents of a reference text file.

    Args:
        path: Path of the reference file.
        encoding: Text encoding of the file.

    Returns:
        Contents of the text file.

    Raises:
        ReferenceFileError: If the file does not exist or can not be read.
    """
    file_ = Path(path)
    context = ErrorContext(filename=f'{file_}')

    if not file_.is_file():
        raise ReferenceFileError('File not found', context=context)

    try:
        return file_.read_text(encoding=encoding)

    except (OSError, UnicodeDecodeError, LookupError) as base:
        raise ReferenceFileError(f'Invalid text IO: {base!r}', context=context) from base
