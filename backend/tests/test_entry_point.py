import uvicorn

from umbrelscan.__main__ import main
from umbrelscan.core.config import settings


def test_main_serves_the_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main()

    assert len(calls) == 1
    app, kwargs = calls[0]
    assert app == "umbrelscan.main:app"
    assert kwargs["host"] == settings.HOST
    assert kwargs["port"] == settings.PORT
