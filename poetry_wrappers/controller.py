import logging
from typing import Callable, List, Optional

from poetry_wrappers.providers import AnalysisProvider, ImageProvider, PoemSource
from poetry_wrappers.schema_models import AppState, GeneratedImage, Poem, PoemAnalysis, ViewState

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch a new poem. Please try again."
ANALYSIS_UNAVAILABLE_NOTICE = "AI insight is unavailable right now."
IMAGE_UNAVAILABLE_NOTICE = "Visualization is unavailable right now."

Listener = Callable[[ViewState], None]


class ViewStateController:
    """
    Single source of truth for what the page shows.

    At most one of load_random_poem, analyze and visualize runs at a time. The
    guard is the state check at the top of each operation; callers are expected
    to be on one event loop. Poem load failures move to ERROR with a generic
    message; analysis and image failures are logged and the controller returns
    to IDLE with only a non-blocking notice.
    """

    def __init__(
        self,
        poem_source: PoemSource,
        analysis_provider: AnalysisProvider,
        image_provider: ImageProvider,
    ):
        self.poem_source = poem_source
        self.analysis_provider = analysis_provider
        self.image_provider = image_provider

        self._state = AppState.IDLE
        self._poem: Optional[Poem] = None
        self._analysis: Optional[PoemAnalysis] = None
        self._generated_image: Optional[GeneratedImage] = None
        self._error: Optional[str] = None
        self._notice: Optional[str] = None
        self._started = False
        self._listeners: List[Listener] = []

    # --- exposed state ---

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def poem(self) -> Optional[Poem]:
        return self._poem

    @property
    def analysis(self) -> Optional[PoemAnalysis]:
        return self._analysis

    @property
    def generated_image(self) -> Optional[GeneratedImage]:
        return self._generated_image

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def notice(self) -> Optional[str]:
        return self._notice

    @property
    def busy(self) -> bool:
        return self._state not in (AppState.IDLE, AppState.ERROR)

    @property
    def can_analyze(self) -> bool:
        return self._state == AppState.IDLE and self._poem is not None and self._analysis is None

    @property
    def can_visualize(self) -> bool:
        return self._state == AppState.IDLE and self._poem is not None and self._generated_image is None

    def snapshot(self) -> ViewState:
        return ViewState(
            state=self._state,
            poem=self._poem,
            analysis=self._analysis,
            generated_image=self._generated_image,
            error=self._error,
            notice=self._notice,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a listener called with a fresh snapshot after every change."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        view = self.snapshot()
        for listener in list(self._listeners):
            # a broken listener must not abort a transition half-way
            try:
                listener(view)
            except Exception:
                logger.exception("Listener failed on %s", view.state.value)

    def _transition(self, state: AppState) -> None:
        logger.debug("%s -> %s", self._state.value, state.value)
        self._state = state
        self._notify()

    # --- operations ---

    async def start(self) -> None:
        """Loads the first poem. Only the first call does anything."""
        if self._started:
            return
        self._started = True
        await self._load()

    async def load_random_poem(self) -> None:
        if self.busy:
            logger.debug("Ignoring reload while %s", self._state.value)
            return
        await self._load()

    async def _load(self) -> None:
        self._analysis = None
        self._generated_image = None
        self._error = None
        self._notice = None
        self._transition(AppState.LOADING_POEM)

        try:
            poem = await self.poem_source.fetch_random_poem()
        except Exception:
            # the previously displayed poem, if any, stays in place
            logger.warning("Poem fetch failed", exc_info=True)
            self._error = FETCH_FAILED_MESSAGE
            self._transition(AppState.ERROR)
            return

        self._poem = poem
        self._transition(AppState.IDLE)

    async def analyze(self) -> None:
        if not self.can_analyze:
            logger.debug("Ignoring analyze in state %s", self._state.value)
            return
        poem = self._poem
        self._notice = None
        self._transition(AppState.ANALYZING)

        try:
            self._analysis = await self.analysis_provider.analyze(poem)
        except Exception:
            logger.exception("Analysis of %r failed", poem.title)
            self._notice = ANALYSIS_UNAVAILABLE_NOTICE
        self._transition(AppState.IDLE)

    async def visualize(self) -> None:
        if not self.can_visualize:
            logger.debug("Ignoring visualize in state %s", self._state.value)
            return
        poem = self._poem
        self._notice = None
        self._transition(AppState.GENERATING_IMAGE)

        try:
            self._generated_image = await self.image_provider.generate_image(poem)
        except Exception:
            logger.exception("Image generation for %r failed", poem.title)
            self._notice = IMAGE_UNAVAILABLE_NOTICE
        self._transition(AppState.IDLE)
