"""The textual runtime around the model, driven headlessly."""

import asyncio

from tmux_popup_control.ui import Model, PopupApp


async def _settle(pilot, done, attempts=40):
    for _ in range(attempts):
        if done():
            return
        await pilot.pause(0.05)


def _run(app, scenario, size=(70, 20)):
    async def main():
        async with app.run_test(size=size) as pilot:
            await scenario(pilot)

    asyncio.run(main())
    return app


class TestPopupApp:
    def test_typing_filters_and_escape_quits(self, model):
        async def scenario(pilot):
            await pilot.press("s", "e")
            assert model.current_level().filter == "se"
            await pilot.press("ctrl+u")
            assert model.current_level().filter == ""
            await pilot.press("escape")
            await _settle(pilot, lambda: not pilot.app.is_running)

        app = _run(PopupApp(model), scenario)
        assert app.return_value == ""

    def test_enter_opens_submenu(self, model):
        async def scenario(pilot):
            # the root cursor starts on "session"
            await pilot.press("enter")
            await _settle(pilot, lambda: model.current_level().id == "session")
            assert model.current_level().id == "session"
            await pilot.press("escape")
            assert model.current_level().id == "root"
            await pilot.press("ctrl+c")
            await _settle(pilot, lambda: not pilot.app.is_running)

        _run(PopupApp(model), scenario)

    def test_terminal_size_reaches_model(self, fake_tmux):
        model = Model()

        async def scenario(pilot):
            await _settle(pilot, lambda: model.width == 90)
            await pilot.press("ctrl+c")

        _run(PopupApp(model), scenario, size=(90, 30))
        assert (model.width, model.height) == (90, 30)
