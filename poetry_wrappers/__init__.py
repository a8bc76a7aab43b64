from .chain_builder import PoemAnalysisChain, PoemImageChain, RandomPoemSource, build_providers
from .controller import ViewStateController
from .schema_models import AppState, GeneratedImage, Poem, PoemAnalysis, ViewState
