"""In-memory cache of Pipedrive stage names."""

import logging
from typing import Awaitable, Callable

StageFetcher = Callable[[], Awaitable[dict[int, str]]]


class StageNameCache:
  """Memoizes stage id -> stage name for the lifetime of the process.

  A miss triggers one bulk fetch of the whole stage list and stores every
  returned pair, so later lookups of any known stage are free. Entries are
  never evicted. Two concurrent misses may both refresh; the refreshes write
  the same values, so no lock is taken.
  """

  def __init__(self, fetch_stages: StageFetcher):
    self._fetch_stages = fetch_stages
    self._names: dict[int, str] = {}

  def __contains__(self, stage_id: int) -> bool:
    return stage_id in self._names

  def __len__(self) -> int:
    return len(self._names)

  async def refresh(self) -> None:
    """Fetches the full stage list and merges it into the cache."""
    stages = await self._fetch_stages()
    self._names.update(stages)
    logging.info(
        "STAGE_CACHE: Refreshed %d stages, %d cached.", len(stages), len(self)
    )

  async def resolve(self, stage_id: int) -> str:
    """Returns the stage name, or "" if Pipedrive does not know the stage."""
    if stage_id in self._names:
      return self._names[stage_id]
    logging.info("STAGE_CACHE: Miss for stage %s.", stage_id)
    await self.refresh()
    return self._names.get(stage_id, "")
