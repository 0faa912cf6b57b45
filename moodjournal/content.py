"""
Motivational content for the Mood Journal service.

Quotes, tips and facts come from fixed seed lists written to the key-value
store once, on first startup. Each list is guarded by its own sentinel key
(``<list>_initialized``) so that later startups leave it alone.
"""

import json
import logging
import random
from collections.abc import Sequence

from .errors import EmptyListError
from .models import Tip
from .store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TIP_SAMPLE = 3

SEED_QUOTES = [
    "The only way out is through. – Robert Frost",
    "Feelings are just visitors. Let them come and go. – Mooji",
    "Your mental health is a priority, not a luxury.",
    "It's okay to not be okay. Healing is not linear.",
    "You are stronger than you think. You are braver than you believe.",
    "Small progress is still progress. Celebrate every step forward.",
    "The greatest glory in living lies not in never falling, but in rising every "
    "time we fall. – Nelson Mandela",
]

SEED_TIPS = [
    Tip(
        category="Physical",
        content="Take a 10-minute walk outside. Fresh air and movement can boost "
        "your mood instantly.",
    ),
    Tip(
        category="Mental",
        content="Practice the 5-4-3-2-1 grounding technique: Name 5 things you see, "
        "4 you can touch, 3 you hear, 2 you smell, and 1 you taste.",
    ),
    Tip(
        category="Social",
        content="Reach out to a friend or loved one. A simple conversation can "
        "brighten your day.",
    ),
    Tip(
        category="Creative",
        content="Listen to your favorite uplifting music or create a mood-boosting "
        "playlist.",
    ),
    Tip(
        category="Mindfulness",
        content="Try 5 minutes of deep breathing. Inhale for 4 counts, hold for 4, "
        "exhale for 6.",
    ),
    Tip(
        category="Self-Care",
        content="Do something nice for yourself today, no matter how small. You "
        "deserve it.",
    ),
    Tip(
        category="Gratitude",
        content="Write down 3 things you're grateful for right now. Gratitude "
        "shifts perspective.",
    ),
    Tip(
        category="Physical",
        content="Drink a glass of water and have a healthy snack. Sometimes mood is "
        "affected by hydration and nutrition.",
    ),
]

SEED_FACTS = [
    "Smiling, even forced, can trigger the release of dopamine and serotonin, "
    "improving your mood.",
    "Spending just 20 minutes in nature can significantly reduce stress hormone "
    "levels.",
    "Writing about your feelings for 15 minutes a day can improve both mental and "
    "physical health.",
    "Exercise releases endorphins, often called 'feel-good' hormones, which "
    "naturally elevate mood.",
    "Laughter decreases stress hormones and increases immune cells and "
    "infection-fighting antibodies.",
    "Getting 7-9 hours of quality sleep is crucial for emotional regulation and "
    "mental health.",
    "Acts of kindness boost serotonin and oxytocin levels, making both giver and "
    "receiver feel good.",
]


def sample_tips(
    tips: Sequence[Tip], k: int = DEFAULT_TIP_SAMPLE, rng: random.Random | None = None
) -> list[Tip]:
    """
    Pick up to ``k`` distinct tips in random order.

    If there are fewer than ``k`` tips, all of them are returned shuffled.
    Every call draws a fresh order.
    """
    rng = rng or random.Random()
    return rng.sample(list(tips), min(max(k, 0), len(tips)))


class ContentService:
    """
    Serves random quotes and facts and samples of tips.

    The service keeps no state of its own; every read goes to the store.
    """

    def __init__(self, store: KeyValueStore, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng or random.Random()

    async def initialize(self) -> None:
        """Write each seed list once, skipping lists whose sentinel is set."""
        seeds = {
            "quotes": SEED_QUOTES,
            "tips": [tip.model_dump() for tip in SEED_TIPS],
            "facts": SEED_FACTS,
        }
        for name, items in seeds.items():
            sentinel = f"{name}_initialized"
            if await self._store.get(sentinel):
                continue
            await self._store.set(name, json.dumps(items))
            await self._store.set(sentinel, "true")
            logger.info("Seeded %d %s", len(items), name)

    async def quotes(self) -> list[str]:
        return await self._load("quotes")

    async def facts(self) -> list[str]:
        return await self._load("facts")

    async def tips(self) -> list[Tip]:
        return [Tip.model_validate(item) for item in await self._load("tips")]

    async def random_quote(self) -> str:
        """Return a uniformly random quote."""
        return self._pick("quotes", await self.quotes())

    async def random_fact(self) -> str:
        """Return a uniformly random fact."""
        return self._pick("facts", await self.facts())

    async def sample_tips(self, k: int = DEFAULT_TIP_SAMPLE) -> list[Tip]:
        """Return a random sample of the stored tips."""
        return sample_tips(await self.tips(), k, rng=self._rng)

    async def _load(self, name: str) -> list:
        raw = await self._store.get(name)
        return json.loads(raw) if raw else []

    def _pick(self, name: str, items: list[str]) -> str:
        if not items:
            raise EmptyListError(f"No {name} available")
        return self._rng.choice(items)
