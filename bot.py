import logging
import os
import sys
from pathlib import Path
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

logging.basicConfig(
    level=os.getenv("TKN_LOG_LEVEL", "INFO"),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("tknotation.bot")
logging.getLogger("PIL").setLevel(logging.ERROR)

from tknotation.assets import AssetStore
from tknotation.compositor import NotationError
from tknotation.pipeline import render_notation_file

MAX_NOTATION_LENGTH = 500

intents = discord.Intents.default()
intents.message_content = True


class NotationBot(commands.Bot):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.asset_store = AssetStore.from_env()

    async def setup_hook(self) -> None:
        try:
            await self.tree.sync()
        except discord.HTTPException as exc:
            logger.warning("Failed to sync application commands: %s", exc)


bot = NotationBot(command_prefix=os.getenv("TKN_PREFIX", "!"), intents=intents)


def _clean_notation(raw: str) -> Optional[str]:
    text = (raw or "").strip()
    if text.startswith("```") and text.endswith("```") and len(text) >= 6:
        text = text[3:-3]
        first_line, _, rest = text.partition("\n")
        if rest and first_line.strip().lower() == "tekken":
            text = rest
    text = text.strip()
    if not text:
        return None
    return text[:MAX_NOTATION_LENGTH]


async def _render_for_reply(notation: str) -> Optional[discord.File]:
    try:
        return await render_notation_file(notation, bot.asset_store)
    except NotationError as exc:
        logger.error("Failed to render notation %r: %s", notation, exc)
        return None


@bot.event
async def on_ready():
    logger.info("Logged in as %s (%s)", bot.user, getattr(bot.user, "id", "?"))


@bot.command(name="tekken")
async def tekken_command(ctx: commands.Context, *, notation: str = ""):
    cleaned = _clean_notation(notation)
    if cleaned is None:
        await ctx.reply("Usage: `!tekken \"Name\", 1+2, f, D \"Launcher!\"`", mention_author=False)
        return
    file = await _render_for_reply(cleaned)
    if file is None:
        await ctx.reply("Couldn't render that notation.", mention_author=False)
        return
    try:
        await ctx.reply(file=file, mention_author=False)
    except discord.HTTPException as exc:
        logger.warning("Failed to send notation image: %s", exc)


@bot.tree.command(name="tekken", description="Render Tekken move notation as an image.")
@app_commands.describe(notation='Moves separated by commas, e.g. "Jin", 1+2, f, D "Launcher!"')
async def slash_tekken_command(interaction: discord.Interaction, notation: str) -> None:
    cleaned = _clean_notation(notation)
    if cleaned is None:
        await interaction.response.send_message("Give me some notation to render.", ephemeral=True)
        return
    await interaction.response.defer(thinking=True)
    file = await _render_for_reply(cleaned)
    if file is None:
        await interaction.followup.send("Couldn't render that notation.", ephemeral=True)
        return
    await interaction.followup.send(file=file)


def main():
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        raise RuntimeError("Missing DISCORD_TOKEN. Set it in your environment or .env file.")
    bot.run(token)


if __name__ == "__main__":
    main()
