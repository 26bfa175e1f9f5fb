import io
import unittest
from unittest import mock

import discord
from PIL import Image

from tknotation import layout
from tknotation.compositor import BACKGROUND_PATHS, SurfaceUnavailableError
from tknotation.models import IconClass, ResolvedToken, TextFallback, Token
from tknotation.parser import parse
from tknotation.pipeline import fetch_assets, render_notation, render_notation_file, render_notation_png, resolve_tokens


def _png(color=(255, 255, 0, 255), size=(50, 50)) -> bytes:
    output = io.BytesIO()
    Image.new("RGBA", size, color).save(output, format="PNG")
    return output.getvalue()


class FakeFetcher:
    def __init__(self, paths=(), fail_with=None) -> None:
        self.assets = {path: _png() for path in paths}
        self.fail_with = fail_with
        self.calls = []

    async def __call__(self, path):
        self.calls.append(path)
        if self.fail_with is not None:
            raise self.fail_with
        return self.assets.get(path)


class DictFetcher:
    """Looks assets up with a plain subscript, so a missing path raises KeyError."""

    def __init__(self, paths) -> None:
        self.assets = {path: _png() for path in paths}

    async def __call__(self, path):
        return self.assets[path]


class ResolveTokensTests(unittest.IsolatedAsyncioTestCase):
    async def test_unfetchable_icons_become_text(self) -> None:
        fetch = FakeFetcher(["attack-buttons/1.png", "attack-buttons/2.png"])
        tokens = parse("1,xyz,2").tokens
        resolved, assets = await resolve_tokens(tokens, fetch)
        self.assertEqual([item.is_icon for item in resolved], [True, False, True])
        self.assertEqual(resolved[1].resolution, TextFallback("xyz"))
        self.assertEqual(set(assets), {"attack-buttons/1.png", "attack-buttons/2.png"})

    async def test_hold_direction_path(self) -> None:
        fetch = FakeFetcher(["attack-buttons/1+2.png", "hold-direction/d.png"])
        parsed = parse('"Jin", 1+2, D')
        resolved, _ = await resolve_tokens(parsed.tokens, fetch)
        self.assertEqual(parsed.name, "Jin")
        self.assertEqual(resolved[0].resolution.icon_class, IconClass.ATTACK)
        self.assertEqual(resolved[1].resolution.icon_class, IconClass.HOLD)
        self.assertEqual(resolved[1].asset_path, "hold-direction/d.png")

    async def test_each_path_fetched_once(self) -> None:
        fetch = FakeFetcher(["attack-buttons/1.png"])
        await resolve_tokens(parse("1,1,1").tokens, fetch, extra_paths=BACKGROUND_PATHS)
        self.assertEqual(sorted(fetch.calls), sorted(["attack-buttons/1.png", *BACKGROUND_PATHS]))

    async def test_fetch_errors_are_absorbed(self) -> None:
        fetch = FakeFetcher(fail_with=OSError("disk gone"))
        with self.assertLogs("tknotation.pipeline", level="WARNING"):
            resolved, assets = await resolve_tokens([Token("1", "1")], fetch)
        self.assertEqual(assets, {})
        self.assertFalse(resolved[0].is_icon)

    async def test_fetch_assets_drops_failures(self) -> None:
        fetch = FakeFetcher(["a.png"])
        self.assertEqual(list(await fetch_assets(fetch, ["a.png", "b.png", "a.png"])), ["a.png"])

    async def test_unexpected_fetcher_errors_only_affect_their_token(self) -> None:
        fetch = DictFetcher(["attack-buttons/1.png", "attack-buttons/3.png"])
        with self.assertLogs("tknotation.pipeline", level="WARNING") as logs:
            resolved, assets = await resolve_tokens(parse("1,2,3").tokens, fetch)
        self.assertEqual([item.is_icon for item in resolved], [True, False, True])
        self.assertEqual(resolved[1].resolution, TextFallback("2"))
        self.assertEqual(set(assets), {"attack-buttons/1.png", "attack-buttons/3.png"})
        self.assertTrue(any("attack-buttons/2.png" in line for line in logs.output))


class RenderNotationTests(unittest.IsolatedAsyncioTestCase):
    async def test_partially_unresolvable_notation_still_renders(self) -> None:
        fetch = FakeFetcher(["attack-buttons/1.png", "attack-buttons/2.png", *BACKGROUND_PATHS])
        image = await render_notation("1,xyz,2", fetch)
        expected = layout.START_WIDTH + 50 + 41 + 50 + layout.END_WIDTH
        self.assertEqual(image.size, (expected, layout.CANVAS_HEIGHT))

    async def test_render_survives_fetcher_raising_key_error(self) -> None:
        fetch = DictFetcher(["attack-buttons/1.png", "attack-buttons/3.png", *BACKGROUND_PATHS])
        with self.assertLogs("tknotation.pipeline", level="WARNING"):
            image = await render_notation("1,2,3", fetch)
        text_advance = layout.token_advance(ResolvedToken(Token("2", "2"), TextFallback("2")))
        expected = layout.START_WIDTH + 50 + text_advance + 50 + layout.END_WIDTH
        self.assertEqual(image.size, (expected, layout.CANVAS_HEIGHT))

    async def test_shorthand_expands_before_resolution(self) -> None:
        fetch = FakeFetcher()
        await render_notation("qcf", fetch, expand_shorthand=True)
        for path in ("press-direction/d.png", "press-direction/df.png", "press-direction/f.png"):
            self.assertIn(path, fetch.calls)
        self.assertNotIn("press-direction/qcf.png", fetch.calls)

        fetch = FakeFetcher()
        await render_notation("qcf", fetch, expand_shorthand=False)
        self.assertIn("press-direction/qcf.png", fetch.calls)

    async def test_png_output(self) -> None:
        data = await render_notation_png('"Jin", 1+2, D "Launcher!"', FakeFetcher(BACKGROUND_PATHS))
        self.assertTrue(data.startswith(b"\x89PNG\r\n\x1a\n"))
        with Image.open(io.BytesIO(data)) as image:
            self.assertEqual(image.height, layout.CANVAS_HEIGHT)

    async def test_discord_file_output(self) -> None:
        file = await render_notation_file("1,2", FakeFetcher(), filename="combo.png")
        self.assertIsInstance(file, discord.File)
        self.assertEqual(file.filename, "combo.png")

    async def test_surface_failure_is_reported(self) -> None:
        with mock.patch("tknotation.pipeline.create_surface", side_effect=SurfaceUnavailableError("no canvas")):
            with self.assertRaises(SurfaceUnavailableError):
                await render_notation("1", FakeFetcher())

    async def test_independent_renders_do_not_share_surfaces(self) -> None:
        fetch = FakeFetcher(BACKGROUND_PATHS)
        first = await render_notation("1", fetch)
        second = await render_notation("1,2,3", fetch)
        self.assertIsNot(first, second)
        self.assertLess(first.width, second.width)


if __name__ == "__main__":
    unittest.main()
