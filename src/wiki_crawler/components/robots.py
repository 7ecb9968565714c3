"""
Robots.txt Exclusion Rules - Disallowed path prefixes for the crawl.

Only simple prefix compliance is supported: every `Disallow:` value in a group
addressed to `*` or to our own user agent becomes a prefix. Allow lines and
wildcards are not interpreted.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Set
from dataclasses import dataclass
from urllib.parse import unquote, urljoin

import requests
from requests.exceptions import RequestException

from ..errors import PolicyFetchError


@dataclass
class RobotsConfig:
    """Configuration for exclusion-policy loading."""
    respect_robots_txt: bool = True
    robots_path: str = "/robots.txt"
    timeout_seconds: float = 10
    decode_percent_escapes: bool = True  # Also store %-decoded form of each rule


class ExclusionRuleSet:
    """
    Set of disallowed path prefixes.

    A path is excluded when it equals a rule or starts with one. Empty rules
    are dropped because an empty `Disallow:` allows everything.
    """

    def __init__(self, prefixes: Optional[Iterable[str]] = None):
        self._prefixes: Set[str] = set()
        for prefix in prefixes or ():
            self.add(prefix)

    def add(self, prefix: str) -> bool:
        """
        Add a prefix.

        Returns:
            True if the prefix was newly added
        """
        prefix = prefix.strip()
        if not prefix or prefix in self._prefixes:
            return False
        self._prefixes.add(prefix)
        return True

    def is_excluded(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._prefixes)

    def __contains__(self, prefix: str) -> bool:
        return prefix in self._prefixes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._prefixes))

    def __len__(self) -> int:
        return len(self._prefixes)

    def __repr__(self) -> str:
        return f"<ExclusionRuleSet rules={len(self)}>"


def _group_applies(agents: List[str], agent_token: Optional[str]) -> bool:
    return any(agent == '*' or (agent_token and agent == agent_token) for agent in agents)


def parse_disallow_rules(policy_text: str, decode_percent_escapes: bool = True,
                         user_agent: Optional[str] = None) -> ExclusionRuleSet:
    """
    Parse robots.txt text into an ExclusionRuleSet.

    Only groups addressed to `*` or to our own product token (the part of
    user_agent before the first '/') contribute. Consecutive `User-agent`
    lines share one group; the first rule line after them closes the list.
    Each `Disallow` line contributes the text after the first colon, trimmed
    and without any trailing comment. Lines without a colon, empty values
    and rules outside any group are skipped.

    Args:
        policy_text: Raw robots.txt content
        decode_percent_escapes: Also add the %-decoded form of escaped rules
        user_agent: Our User-Agent header; None matches the `*` group only

    Returns:
        ExclusionRuleSet with one prefix per rule
    """
    rules = ExclusionRuleSet()
    agent_token = user_agent.split('/', 1)[0].strip().lower() if user_agent else None

    group_agents: List[str] = []
    group_closed = False

    for line in policy_text.splitlines():
        # Strip inline comments
        line = line.split('#', 1)[0].strip()

        directive, sep, value = line.partition(':')
        if not sep:
            continue
        directive = directive.strip().lower()
        value = value.strip()

        if directive == 'user-agent':
            if group_closed:
                group_agents = []
                group_closed = False
            group_agents.append(value.lower())
            continue

        group_closed = True
        if directive != 'disallow' or not value:
            continue
        if not _group_applies(group_agents, agent_token):
            continue

        rules.add(value)
        if decode_percent_escapes and '%' in value:
            rules.add(unquote(value))

    return rules


class RobotsSource:
    """Fetches the raw exclusion-policy text for a site."""

    def __init__(self, base_url: str, config: RobotsConfig,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url
        self.config = config
        self.session = session or requests.Session()
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def robots_url(self) -> str:
        return urljoin(self.base_url, self.config.robots_path)

    def fetch_policy(self) -> str:
        """
        Fetch robots.txt.

        Raises:
            PolicyFetchError: On network failure or non-success status
        """
        robots_url = self.robots_url
        self.logger.info(f"Fetching robots.txt from {robots_url}")

        try:
            response = self.session.get(robots_url, timeout=self.config.timeout_seconds)
        except RequestException as e:
            raise PolicyFetchError(f"Could not fetch {robots_url}: {e}") from e

        try:
            if response.status_code != 200:
                raise PolicyFetchError(
                    f"Could not fetch {robots_url}: HTTP {response.status_code}"
                )
            return response.text
        finally:
            response.close()


def load_exclusion_rules(source: RobotsSource, config: RobotsConfig,
                         logger: Optional[logging.Logger] = None,
                         user_agent: Optional[str] = None) -> ExclusionRuleSet:
    """
    Fetch and parse the site policy, falling back to an empty rule set.

    A failed fetch is logged and never aborts the crawl.
    """
    logger = logger or logging.getLogger(__name__)

    if not config.respect_robots_txt:
        logger.info("Ignoring robots.txt (respect_robots_txt is disabled)")
        return ExclusionRuleSet()

    try:
        policy_text = source.fetch_policy()
    except PolicyFetchError as e:
        logger.warning(f"{e}; continuing with no exclusion rules")
        return ExclusionRuleSet()

    rules = parse_disallow_rules(policy_text, config.decode_percent_escapes, user_agent)
    logger.info(f"Loaded {len(rules)} disallowed prefixes from robots.txt")
    return rules
