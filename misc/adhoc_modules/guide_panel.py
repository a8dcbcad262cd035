from __future__ import annotations

from datetime import datetime, timezone

import discord

from config.defaults import BRAND_COLOR
from config.defaults import PLAY_URL

DOCS_URL = "https://docs.peaxel.me/"
ACE_AI_URL = "https://ace.peaxel.me"
LOGO_URL = "https://peaxel.me/wp-content/uploads/2025/06/peaxel_logo_beta-1.png"
GUIDE_COLOR = 0xA855F7
SPACER = "\u200b"

# select value -> (emoji, option label, option description, link label, url)
HELP_TOPICS = {
    "link_play": ("🎮", "How to Play", "Basic rules and getting started.", "Guide: Getting Started", "https://docs.peaxel.me/guide/getting-started"),
    "link_gw": ("🏆", "Game Week & Rewards", "Schedule and prizes.", "Guide: Game Week", "https://docs.peaxel.me/guide/game-week"),
    "link_cards": ("🃏", "Cards & Rarity", "Learn about athlete cards.", "Guide: Cards & Rarity", "https://docs.peaxel.me/guide/cards-and-rarity"),
    "link_support": ("🛠️", "Technical Support", "Troubleshooting and Ace AI.", "Chat with Ace AI", ACE_AI_URL),
}

GUIDE_LINKS = (
    ("Play Now 🎮", PLAY_URL),
    ("Athlete List 📋", "https://peaxel.me/list-of-all-athletes-on-peaxel/"),
    ("Full Guide 📖", DOCS_URL),
    ("Free Cards 🃏", "https://peaxel.me/win-5-freecards-of-athletes/"),
)

GUIDE_SECTIONS = (
    (
        "🏃 1. Build your Lineup",
        "• **Where:** Go to *Team → All My Cards* or the *Competition* page.\n"
        "• **Size:** Minimum 1 card, maximum 5 cards per lineup.\n"
        "• **How:** Tap a card and select 'Lineup' to add/remove it.\n"
        "• **Tip:** Cards in a lineup are locked from sale until the week ends.",
    ),
    (
        "📈 2. Scoring System",
        "• **Base:** Weekly Score based on real-world athlete performance.\n"
        "• **Bonuses:** Based on card **Force**, **Experience (XP)**, and **Collection** size.\n"
        "• **Formula:** Base Score + Force + XP + Collection boost.",
    ),
    (
        "⏱️ 3. Weekly Deadlines",
        "• **Cycle:** Gameweek runs Monday 00:01 → Sunday 23:59.\n"
        "• **Editing:** Open from **Monday** to **Thursday 23:59 (Paris Time)**.\n"
        "• **Lock:** Lineups are frozen from Friday to Sunday.\n"
        "• **Results:** Rankings and rewards are published every Monday.",
    ),
    (
        "🤖 4. Autoplay Feature",
        "• **Ace Bot:** Automatically drafts your top 5 cards from Mon. to Wed.\n"
        "• **Manual:** You retain full control to override choices on Thursday.\n"
        "• **Security:** Ensures you never miss a reward cycle.",
    ),
    (
        "🏆 5. Rewards",
        "• **Tiered System:** Every participant earns rewards based on rank.\n"
        "• **Direct Pay:** Earnings are sent straight to your Peaxel wallet.\n"
        "• **Loyalty:** Consistent weekly play increases your reward potential.",
    ),
)


def build_guide_embed() -> discord.Embed:
    embed = discord.Embed(
        title="🎮 HOW TO PLAY PEAXEL | Official Guide",
        description=f"Master the scouting game! Here is everything you need to know to dominate the leaderboard.\n{SPACER}",
        color=GUIDE_COLOR,
        timestamp=datetime.now(timezone.utc),
    )
    embed.set_thumbnail(url=LOGO_URL)
    for i, (name, value) in enumerate(GUIDE_SECTIONS):
        # blank line between sections, not after the last one
        suffix = f"\n{SPACER}" if i < len(GUIDE_SECTIONS) - 1 else ""
        embed.add_field(name=name, value=value + suffix, inline=False)
    embed.set_footer(text="Peaxel • The Next Generation of Scouting", icon_url=LOGO_URL)
    return embed


def build_guide_view() -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    for label, url in GUIDE_LINKS:
        view.add_item(discord.ui.Button(label=label, style=discord.ButtonStyle.link, url=url))
    return view


def build_help_embed() -> discord.Embed:
    return discord.Embed(
        title="🏟️ Peaxel Help Center",
        description=(
            "Select a topic below to open the official documentation.\n\n"
            "🤖 **Need more help?**\n"
            f"Talk to our specialized AI at [ace.peaxel.me]({ACE_AI_URL}). "
            "It can answer complex questions and help you open a support ticket if needed."
        ),
        color=BRAND_COLOR,
    )


def help_topic_link(value: str) -> tuple[str, str]:
    """(link label, url) for a selected topic; unknown values open the docs root."""
    topic = HELP_TOPICS.get(value)
    if topic is None:
        return "Open Documentation", "https://docs.peaxel.me/guide"
    return topic[3], topic[4]


def build_topic_links_view(value: str) -> discord.ui.View:
    label, url = help_topic_link(value)
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(label=label, style=discord.ButtonStyle.link, url=url))
    view.add_item(discord.ui.Button(label="Main Docs", style=discord.ButtonStyle.link, url=DOCS_URL))
    return view


def build_help_view(*, timeout: float = 60) -> discord.ui.View:
    class HelpMenu(discord.ui.View):
        def __init__(self):
            super().__init__(timeout=timeout)

        @discord.ui.select(
            custom_id="help_select",
            placeholder="What are you looking for?",
            options=[
                discord.SelectOption(label=label, description=description, value=value, emoji=emoji)
                for value, (emoji, label, description, _, _) in HELP_TOPICS.items()
            ],
        )
        async def topic_select(self, interaction: discord.Interaction, select: discord.ui.Select):
            value = select.values[0] if select.values else ""
            label, _ = help_topic_link(value)
            await interaction.response.edit_message(
                content=f"🔗 Access the **{label}** here:",
                embed=None,
                view=build_topic_links_view(value),
            )

    return HelpMenu()
