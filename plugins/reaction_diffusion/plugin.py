"""
Plugin registration for DayDream Scope

Registers the reaction-diffusion pipeline as a video source.
Uses @hookimpl decorator when Scope's formal plugin API is available,
falls back to the simpler registry pattern otherwise.
"""

try:
    from scope.core.plugins.hookspecs import hookimpl
except ImportError:
    hookimpl = None

from .pipeline import RDPipeline


if hookimpl is not None:
    @hookimpl
    def register_pipelines(register):
        """Called when Scope loads the plugin (formal @hookimpl API)."""
        register(RDPipeline)
else:
    def register_pipelines(registry):
        """Called when Scope loads the plugin (simple registry API)."""
        registry.register(
            name="reaction_diffusion",
            pipeline_class=RDPipeline,
            description="Gray-Scott reaction-diffusion as video source",
        )
