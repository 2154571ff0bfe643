"""
Route Loader - assemble one router from independently authored route modules.

A route module is a Python file exposing a module-level ``register``:

    def register(router):
        @router.get("/users/<id>")
        @validate_contract(GetUserContract)
        def get_user(id):
            ...
        return router

Two ways to find route modules:
- assemble_router(ROUTE_MODULES): fold an explicit, ordered mapping of
  route-group name -> register function (no filesystem scanning)
- RouteLoader / load_routes(): glob for route files and load each one

Either way every ``register`` call runs in order against a child router named
after its module, and the child is nested into the shared router. Endpoints
end up as ``api.<module>.<view>``, so two modules may both define ``handler``.
Any failure, endpoint clashes included, aborts assembly with the offending
file or group named. There is no partial router.

File discovery modes:
    source    backend/routes/[!_]*.py    (development-like ENV)
    compiled  build/routes/[!_]*.pyc     (everything else; see compile_routes)
"""

import glob
import hashlib
import importlib.util
import logging
import os
import py_compile
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

from flask import Blueprint, Flask

from config import is_development_env


logger = logging.getLogger('api.routes')


class LoaderMode(Enum):
    """Which kind of route file the loader accepts."""
    SOURCE = "source"
    COMPILED = "compiled"


class LoaderState(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    LOADING = "loading"
    ASSEMBLED = "assembled"
    FAILED = "failed"


DEFAULT_PATTERNS = {
    LoaderMode.SOURCE: "backend/routes/[!_]*.py",
    LoaderMode.COMPILED: "build/routes/[!_]*.pyc",
}

EXTENSIONS = {
    LoaderMode.SOURCE: ".py",
    LoaderMode.COMPILED: ".pyc",
}

REGISTER_ATTR = "register"


class RouteLoadError(RuntimeError):
    """A route module could not be loaded or registered. Fatal at startup."""

    def __init__(self, path: str, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Error when loading route file: {path} [ {cause!r} ]")


def get_loader_mode(mode=None) -> LoaderMode:
    """
    Resolve the loader mode.

    Explicit value wins, then ROUTES_MODE, then the ENV-derived default
    (source in development-like environments, compiled otherwise).
    """
    raw = mode if mode is not None else os.environ.get("ROUTES_MODE")
    if isinstance(raw, LoaderMode):
        return raw
    if raw:
        try:
            return LoaderMode(raw.lower())
        except ValueError:
            raise ValueError(
                f"Unknown route loader mode {raw!r}; "
                f"expected one of {[m.value for m in LoaderMode]}"
            ) from None
    return LoaderMode.SOURCE if is_development_env() else LoaderMode.COMPILED


def create_router(name: str = "api") -> Blueprint:
    """Fresh, empty router."""
    return Blueprint(name, __name__)


def _scope_name(origin: str) -> str:
    """Blueprint-safe name for a route module: file stem or group name."""
    stem = os.path.splitext(os.path.basename(origin))[0]
    return re.sub(r'\W', '_', stem) or "routes"


def _register(router: Blueprint, register: Callable, origin: str,
              mounted: Dict[str, str]) -> None:
    """
    Run one register function and nest its routes into the shared router.

    Each module registers onto its own child router named after the module,
    so endpoints are namespaced ``<router>.<module>.<view>`` and independent
    modules may reuse view function names. The module returns that child
    (augmented) or a replacement Blueprint; whichever it returns is nested.

    Raises:
        TypeError: register is not callable or does not return a Blueprint
        ValueError: the returned router's name is already mounted
        AssertionError: two views in the module share an endpoint
    """
    if not callable(register):
        raise TypeError(f"'{REGISTER_ATTR}' is not callable (got {register!r})")
    result = register(create_router(_scope_name(origin)))
    if not isinstance(result, Blueprint):
        raise TypeError(
            f"'{REGISTER_ATTR}' must return the router, got {result!r}"
        )
    if result.name in mounted:
        raise ValueError(
            f"router name {result.name!r} is already used by {mounted[result.name]}"
        )
    # Flask only checks endpoints when a blueprint is mounted on an app
    Flask(__name__).register_blueprint(result)
    router.register_blueprint(result)
    mounted[result.name] = origin
    logger.debug(f"Registered routes from {origin} as {router.name}.{result.name}")


@dataclass
class RouteLoader:
    """
    Discovers route files by glob pattern and folds them into one router.

    State machine: idle -> discovering -> loading -> assembled | failed.
    A loader is single use.
    """
    pattern: Optional[str] = None
    mode: Optional[LoaderMode] = None
    cwd: Optional[str] = None
    require_routes: bool = False

    state: LoaderState = field(default=LoaderState.IDLE, init=False)
    loaded: List[str] = field(default_factory=list, init=False)

    def __post_init__(self):
        self.mode = get_loader_mode(self.mode)
        if self.pattern is None:
            self.pattern = DEFAULT_PATTERNS[self.mode]
        if self.cwd is None:
            self.cwd = os.getcwd()

    @property
    def extension(self) -> str:
        return EXTENSIONS[self.mode]

    def discover(self) -> List[str]:
        """
        Resolve the pattern relative to cwd, in lexical order.

        A glob failure is logged and treated as "no files found".
        """
        self.state = LoaderState.DISCOVERING
        try:
            files = glob.glob(self.pattern, root_dir=self.cwd)
        except (OSError, ValueError, TypeError) as e:
            logger.error(
                f"Route discovery failed for pattern {self.pattern!r} in {self.cwd}: {e}"
            )
            files = []
        return sorted(files)

    def _is_candidate(self, file: str) -> bool:
        full_path = os.path.join(self.cwd, file)
        return (
            os.path.isfile(full_path)
            and os.path.splitext(file)[1].lower() == self.extension
        )

    def load(self, router: Optional[Blueprint] = None) -> Blueprint:
        """
        Discover, load and register every route file.

        Raises:
            RouteLoadError: a file failed to load or register, or nothing
                was found while require_routes is set
        """
        if self.state is not LoaderState.IDLE:
            raise RuntimeError(f"RouteLoader already used (state={self.state.value})")

        if router is None:
            router = create_router()

        files = self.discover()
        candidates = [f for f in files if self._is_candidate(f)]

        if not candidates:
            logger.warning(
                f"No route files matched {self.pattern!r} "
                f"(mode={self.mode.value}, cwd={self.cwd})"
            )
            if self.require_routes:
                self.state = LoaderState.FAILED
                raise RouteLoadError(self.pattern, "no route files found")

        self.state = LoaderState.LOADING
        mounted: Dict[str, str] = {}
        for file in candidates:
            path = os.path.join(self.cwd, file)
            try:
                module = _load_module(path)
                register = getattr(module, REGISTER_ATTR, None)
                if register is None:
                    raise AttributeError(
                        f"module has no '{REGISTER_ATTR}(router)' function"
                    )
                _register(router, register, file, mounted)
            except Exception as e:
                sys.modules.pop(_module_name(path), None)
                self.state = LoaderState.FAILED
                raise RouteLoadError(file, e) from e
            self.loaded.append(file)

        self.state = LoaderState.ASSEMBLED
        logger.info(
            f"Assembled router from {len(self.loaded)} route file(s) "
            f"(mode={self.mode.value})"
        )
        return router


def _module_name(path: str) -> str:
    stem = os.path.splitext(os.path.basename(path))[0]
    digest = hashlib.sha1(os.path.abspath(path).encode()).hexdigest()[:8]
    return f"_route_module_{stem}_{digest}"


def _load_module(path: str):
    """
    Execute a route file as a fresh module.

    .pyc files go through the sourceless bytecode loader.
    """
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot create a module spec for {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def load_routes(pattern: Optional[str] = None, router: Optional[Blueprint] = None,
                **kwargs) -> Blueprint:
    """Shortcut for RouteLoader(pattern, ...).load(router)."""
    return RouteLoader(pattern=pattern, **kwargs).load(router)


def assemble_router(registry: Mapping[str, Callable],
                    router: Optional[Blueprint] = None) -> Blueprint:
    """
    Fold an explicit registry of route groups into one router.

    Args:
        registry: ordered mapping of group name -> register(router) function
        router: router to start from (a fresh one by default)

    Raises:
        RouteLoadError: naming the group that failed
    """
    if router is None:
        router = create_router()
    mounted: Dict[str, str] = {}
    for group, register in registry.items():
        try:
            _register(router, register, group, mounted)
        except Exception as e:
            raise RouteLoadError(group, e) from e
    logger.info(f"Assembled router from {len(registry)} route group(s)")
    return router


def compile_routes(src_dir: str = "backend/routes",
                   out_dir: str = "build/routes") -> List[str]:
    """
    Byte-compile route modules for compiled mode.

    Writes one ``<name>.pyc`` per ``<name>.py`` (underscore-prefixed files
    skipped) and returns the written paths in lexical order.
    """
    os.makedirs(out_dir, exist_ok=True)
    written = []
    for source in sorted(glob.glob(os.path.join(src_dir, "[!_]*.py"))):
        stem = os.path.splitext(os.path.basename(source))[0]
        target = os.path.join(out_dir, f"{stem}.pyc")
        py_compile.compile(source, cfile=target, doraise=True)
        written.append(target)
    return written


def load_app_routes(config: Dict) -> Blueprint:
    """
    Build the application router according to config.

    ROUTE_DISCOVERY=registry uses routes.ROUTE_MODULES; glob uses RouteLoader
    with ROUTES_GLOB / ROUTES_MODE / ROUTES_REQUIRE_MATCH.
    """
    discovery = (config.get('ROUTE_DISCOVERY') or 'registry').lower()
    if discovery == 'registry':
        from routes import ROUTE_MODULES
        return assemble_router(ROUTE_MODULES)
    if discovery == 'glob':
        return load_routes(
            pattern=config.get('ROUTES_GLOB'),
            mode=config.get('ROUTES_MODE'),
            require_routes=bool(config.get('ROUTES_REQUIRE_MATCH')),
        )
    raise ValueError(
        f"Unknown ROUTE_DISCOVERY {discovery!r}; expected 'registry' or 'glob'"
    )
