"""
Deployment profile selector: maps a repository's declared project type to its step sequence.
"""
from typing import Dict, List, Tuple

from ..core.enums import ProfileType
from ..core.exceptions import UnknownProfileError
from .models import StepSpec, DeploymentProfile, RunCommand, NodeCommand, GitPull, GitReset

COMPOSER_INSTALL = "composer install --no-dev --optimize-autoloader"
DOCTRINE_MIGRATE = "php bin/console doctrine:migrations:migrate --no-interaction"
DOCTRINE_MIGRATE_PREV = "php bin/console doctrine:migrations:migrate prev --no-interaction"
CACHE_CLEAR = "php bin/console cache:clear --env=prod"
ASSET_MAP_COMPILE = "php bin/console asset-map:compile"


GIT_PULL = StepSpec(
    name="git_pull",
    forward_action=GitPull(),
    compensating_action=GitReset(),
)

DEPENDENCY_INSTALL = StepSpec(
    name="dependency_install",
    forward_action=RunCommand(COMPOSER_INSTALL, requires="composer.json"),
    compensating_action=RunCommand(COMPOSER_INSTALL, requires="composer.json", at_anchor=True),
)

FRONTEND_INSTALL = StepSpec(
    name="frontend_install",
    forward_action=NodeCommand(npm="npm ci", yarn="yarn install --frozen-lockfile", requires="package.json"),
    compensating_action=NodeCommand(
        npm="npm ci", yarn="yarn install --frozen-lockfile", requires="package.json", at_anchor=True
    ),
)

FRONTEND_BUILD = StepSpec(
    name="frontend_build",
    forward_action=NodeCommand(npm="npm run build", yarn="yarn build"),
    compensating_action=NodeCommand(npm="npm run build", yarn="yarn build", at_anchor=True),
)

ASSET_COMPILE = StepSpec(
    name="asset_compile",
    forward_action=RunCommand(ASSET_MAP_COMPILE),
    compensating_action=RunCommand(ASSET_MAP_COMPILE, at_anchor=True),
)

# Down migrations need the migration classes of the new tree, so no anchor restore here
SCHEMA_MIGRATE = StepSpec(
    name="schema_migrate",
    forward_action=RunCommand(DOCTRINE_MIGRATE),
    compensating_action=RunCommand(DOCTRINE_MIGRATE_PREV),
)

CACHE_CLEAR_STEP = StepSpec(
    name="cache_clear",
    forward_action=RunCommand(CACHE_CLEAR),
    compensating_action=RunCommand(CACHE_CLEAR, at_anchor=True),
)


PROFILE_STEPS: Dict[ProfileType, Tuple[StepSpec, ...]] = {
    ProfileType.SIMPLE: (GIT_PULL,),
    ProfileType.SYMFONY_API: (
        GIT_PULL, DEPENDENCY_INSTALL, SCHEMA_MIGRATE, CACHE_CLEAR_STEP,
    ),
    ProfileType.SYMFONY_WEBPACK: (
        GIT_PULL, DEPENDENCY_INSTALL, FRONTEND_INSTALL, FRONTEND_BUILD, SCHEMA_MIGRATE, CACHE_CLEAR_STEP,
    ),
    ProfileType.SYMFONY_ASSET_MAPPER: (
        GIT_PULL, DEPENDENCY_INSTALL, ASSET_COMPILE, SCHEMA_MIGRATE, CACHE_CLEAR_STEP,
    ),
}

PROFILE_DESCRIPTIONS: Dict[ProfileType, str] = {
    ProfileType.SYMFONY_WEBPACK: "Symfony with Webpack/Encore (npm build)",
    ProfileType.SYMFONY_ASSET_MAPPER: "Symfony with AssetMapper (asset-map:compile)",
    ProfileType.SYMFONY_API: "Symfony API only (no frontend compilation)",
    ProfileType.SIMPLE: "Simple deployment (git pull only)",
}


class ProfileSelector:
    """Resolves profile type strings to fixed deployment profiles"""

    def resolve(self, profile_type: str) -> DeploymentProfile:
        """
        Resolve a profile type.

        Raises:
            UnknownProfileError: the type is not one of the known profiles;
                there is deliberately no default profile
        """
        try:
            resolved = ProfileType(profile_type)
        except ValueError:
            raise UnknownProfileError(profile_type)
        return DeploymentProfile(profile_type=resolved, steps=PROFILE_STEPS[resolved])

    @staticmethod
    def available_profiles() -> List[str]:
        return [profile.value for profile in ProfileType]
