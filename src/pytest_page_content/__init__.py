"""Pytest plugin for fluent page content tests.

The `pytest_page_content` package provides a fluent DSL describing a
sequence of browser interactions against a fixed HTML document, followed
by expectations evaluated against the resulting page state and the
events reported by the page.

Key features:
- actions run strictly in order against one shared Playwright page;
- expectations run concurrently once every action has completed;
- element content comparison synchronized with asynchronous content
  loading addressed through anchors' logical selectors;
- pytest fixtures wiring the chain to Playwright.
"""
