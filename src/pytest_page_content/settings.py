"""Runtime settings for page content fixtures.

Settings are resolved from environment variables prefixed with
`PAGE_CONTENT_` and may be overridden by pytest command-line options.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from pytest_page_content.models import SettingsModel


class PageContentSettings(SettingsModel):
    """Settings shared by every chain built within a pytest session."""

    model_config = SettingsConfigDict(
        env_prefix='PAGE_CONTENT_',
        frozen=True,
        extra='ignore',
    )

    page_url: str = Field(
        default='http://localhost/index.html',
        title='Document URL',
        description=(
            'URL the document under test is served at. '
            'The default context preparer routes this URL to the document.'
        ),
    )

    event_name: str = Field(
        default='load',
        title='Event type',
        description=(
            'Type of the DOM `CustomEvent` dispatched on `document` '
            'whose `detail` is recorded by the event logger.'
        ),
    )

    binding_name: str = Field(
        default='__pageContentNotify',
        title='Binding name',
        description='Name of the function exposed to the page by the event logger.',
    )

    target_key: str = Field(
        default='target',
        title='Target detail key',
        description=(
            'Key of an event detail naming the logical selector '
            'of the element that has received its content.'
        ),
    )

    anchor_attribute: str = Field(
        default='data-target',
        title='Anchor attribute',
        description='Attribute of anchors carrying logical selectors.',
    )

    fixtures_dir: Path | None = Field(
        default=None,
        title='Reference files directory',
        description='Base directory for relative reference file names.',
    )

    encoding: str = Field(
        default='utf-8',
        title='Reference files encoding',
    )

    timeout: float | None = Field(
        default=None,
        ge=0,
        title='Automation timeout',
        description='Default Playwright timeout in milliseconds.',
    )

    def resolve_reference(self, filename: str | Path) -> Path:
        """Resolve a reference file name against the fixtures directory.

        Args:
            filename: Absolute or relative reference file path.

        Returns:
            The reference file path.
        """
        path = Path(filename)
        if self.fixtures_dir is None or path.is_absolute():
            return path

        return self.fixtures_dir / path
