# tests/test_mappers.py

"""Mapper round trips: every field a desired state sets survives apply then read back."""

import pytest

from git_providers.core.exceptions import InvalidArgumentError
from git_providers.source_control.models import (
    BranchInfo,
    DeployKeyInfo,
    PullRequestInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    desired_matches,
)
from git_providers.source_control.providers.github.github_mappers import (
    GitHubBranchMapper,
    GitHubDeployKeyMapper,
    GitHubPullRequestMapper,
    GitHubRepositoryMapper,
    GitHubTeamAccessMapper,
)
from git_providers.source_control.providers.github.github_models import (
    GitHubBranch,
    GitHubDeployKey,
    GitHubPullRequest,
    GitHubRepository,
    GitHubTeamAccess,
)
from git_providers.source_control.providers.gitlab.gitlab_mappers import (
    GitLabBranchMapper,
    GitLabDeployKeyMapper,
    GitLabMergeRequestMapper,
    GitLabProjectMapper,
    GitLabTeamAccessMapper,
    permission_for_level,
)
from git_providers.source_control.providers.gitlab.gitlab_models import (
    GitLabBranch,
    GitLabDeployKey,
    GitLabMergeRequest,
    GitLabProject,
    GitLabSharedGroup,
)
from git_providers.source_control.providers.stash.stash_mappers import (
    StashBranchMapper,
    StashDeployKeyMapper,
    StashPullRequestMapper,
    StashRepositoryMapper,
    StashTeamAccessMapper,
)
from git_providers.source_control.providers.stash.stash_models import (
    StashBranch,
    StashDeployKey,
    StashGroupPermission,
    StashPullRequest,
    StashRepository,
)

REPOSITORY_STATES = [
    RepositoryInfo(description="widgets"),
    RepositoryInfo(description=""),
    RepositoryInfo(default_branch="trunk"),
    RepositoryInfo(visibility=RepositoryVisibility.PUBLIC),
    RepositoryInfo(visibility=RepositoryVisibility.PRIVATE),
    RepositoryInfo(description="all", default_branch="main", visibility="private"),
]

CASES = [
    # (mapper, existing server object, desired states)
    (
        GitHubRepositoryMapper(),
        GitHubRepository(id=1, name="w", full_name="acme/w", description="old", private=False),
        REPOSITORY_STATES + [RepositoryInfo(visibility=RepositoryVisibility.INTERNAL)],
    ),
    (
        GitLabProjectMapper(),
        GitLabProject(id=1, path="w", path_with_namespace="acme/w", visibility="public"),
        REPOSITORY_STATES + [RepositoryInfo(visibility=RepositoryVisibility.INTERNAL)],
    ),
    (
        StashRepositoryMapper(),
        StashRepository(id=1, slug="w", name="w", project={"key": "ACME"}, public=True),
        REPOSITORY_STATES,
    ),
    (
        GitHubDeployKeyMapper(),
        GitHubDeployKey(id=1, title="ci", key="ssh-ed25519 AAA", read_only=True),
        [DeployKeyInfo(key="ssh-ed25519 BBB"), DeployKeyInfo(name="ci", read_only=False)],
    ),
    (
        GitLabDeployKeyMapper(),
        GitLabDeployKey(id=1, title="ci", key="ssh-ed25519 AAA", can_push=False),
        [DeployKeyInfo(key="ssh-ed25519 BBB"), DeployKeyInfo(read_only=False), DeployKeyInfo(read_only=True)],
    ),
    (
        StashDeployKeyMapper(),
        StashDeployKey(key={"id": 4, "label": "ci", "text": "ssh-rsa AAA"}, permission="REPO_READ"),
        [DeployKeyInfo(key="ssh-rsa BBB"), DeployKeyInfo(read_only=False), DeployKeyInfo(name="ci")],
    ),
    (
        GitHubTeamAccessMapper(),
        GitHubTeamAccess(slug="core", permission="pull"),
        [TeamAccessInfo(permission=p) for p in RepositoryPermission],
    ),
    (
        GitLabTeamAccessMapper("acme"),
        GitLabSharedGroup(group_id=9, group_full_path="acme/core", group_access_level=10),
        [TeamAccessInfo(permission=p) for p in RepositoryPermission] + [TeamAccessInfo(name="core")],
    ),
    (
        StashTeamAccessMapper(),
        StashGroupPermission(group={"name": "core"}, permission="REPO_READ"),
        [TeamAccessInfo(permission=p) for p in ("pull", "push", "admin")],
    ),
    (
        GitHubBranchMapper(),
        GitHubBranch(name="main", sha="aaa"),
        [BranchInfo(sha="bbb"), BranchInfo(name="dev")],
    ),
    (
        GitLabBranchMapper(),
        GitLabBranch(name="main", commit={"id": "aaa", "title": "init"}),
        [BranchInfo(sha="bbb"), BranchInfo(name="dev")],
    ),
    (
        StashBranchMapper(),
        StashBranch(id="refs/heads/main", display_id="main", latest_commit="aaa"),
        [BranchInfo(sha="bbb"), BranchInfo(name="dev")],
    ),
    (
        GitHubPullRequestMapper(),
        GitHubPullRequest(number=3, title="t", head_ref="f", base_ref="main"),
        [PullRequestInfo(title="new", description="body"), PullRequestInfo(target_branch="dev")],
    ),
    (
        GitLabMergeRequestMapper(),
        GitLabMergeRequest(iid=3, title="t", source_branch="f", target_branch="main"),
        [PullRequestInfo(title="new", description="body"), PullRequestInfo(target_branch="dev")],
    ),
    (
        StashPullRequestMapper(),
        StashPullRequest(
            id=3,
            version=0,
            title="t",
            from_ref={"id": "refs/heads/f", "displayId": "f"},
            to_ref={"id": "refs/heads/main", "displayId": "main"},
        ),
        [PullRequestInfo(title="new", description="body"), PullRequestInfo(source_branch="g")],
    ),
]


def _round_trip_cases():
    for mapper, obj, states in CASES:
        for desired in states:
            yield pytest.param(mapper, obj, desired, id=f"{type(mapper).__name__}-{desired}")


class TestLeftInverse:
    @pytest.mark.parametrize("mapper,obj,desired", list(_round_trip_cases()))
    def test_apply_then_read_back(self, mapper, obj, desired):
        updated = mapper.apply_desired(desired, obj)
        assert desired_matches(desired, mapper.to_desired(updated))

    @pytest.mark.parametrize("mapper,obj,desired", list(_round_trip_cases()))
    def test_apply_does_not_mutate_input(self, mapper, obj, desired):
        before = obj.model_dump()
        mapper.apply_desired(desired, obj)
        assert obj.model_dump() == before


class TestServerFieldsSurvive:
    def test_github_update_keeps_server_fields(self):
        obj = GitHubRepository(id=1, name="w", full_name="acme/w", html_url="https://github.com/acme/w")
        updated = GitHubRepositoryMapper().apply_desired(RepositoryInfo(description="x"), obj)
        assert updated.id == 1
        assert updated.html_url == "https://github.com/acme/w"

    def test_stash_pull_request_keeps_version(self):
        obj = StashPullRequest(id=3, version=7, title="t", from_ref={}, to_ref={})
        updated = StashPullRequestMapper().apply_desired(PullRequestInfo(title="x"), obj)
        assert updated.version == 7


class TestBackendRules:
    def test_stash_rejects_internal_visibility(self):
        with pytest.raises(InvalidArgumentError):
            StashRepositoryMapper().validate_desired(
                RepositoryInfo(visibility=RepositoryVisibility.INTERNAL)
            )

    @pytest.mark.parametrize("permission", ["triage", "maintain"])
    def test_stash_rejects_unknown_permissions(self, permission):
        with pytest.raises(InvalidArgumentError):
            StashTeamAccessMapper().validate_desired(TeamAccessInfo(name="core", permission=permission))

    def test_stash_create_options_unsupported(self):
        obj = StashRepository(name="w")
        with pytest.raises(InvalidArgumentError):
            StashRepositoryMapper().apply_create_options(obj, RepositoryCreateOptions(auto_init=True))

    def test_gitlab_rejects_license_template(self):
        with pytest.raises(InvalidArgumentError):
            GitLabProjectMapper().apply_create_options(
                GitLabProject(name="w"), RepositoryCreateOptions(license_template="mit")
            )

    def test_github_create_options(self):
        obj = GitHubRepositoryMapper().apply_create_options(
            GitHubRepository(name="w"), RepositoryCreateOptions(auto_init=True, license_template="mit")
        )
        assert obj.auto_init is True
        assert obj.license_template == "mit"

    def test_gitlab_custom_access_levels_round_down(self):
        assert permission_for_level(35) is RepositoryPermission.PUSH
        assert permission_for_level(5) is RepositoryPermission.PULL
        assert permission_for_level(None) is None

    def test_gitlab_team_names_are_relative(self):
        mapper = GitLabTeamAccessMapper("acme")
        assert mapper.full_path("core") == "acme/core"
        assert mapper.full_path("other/core") == "other/core"
        assert mapper.relative_name("acme/core") == "core"
