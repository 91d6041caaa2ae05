"""Domain layer: keyword intent parsing using Strategy pattern.

A command is lower-cased and matched against an ordered list of rules. A
rule fires when the text contains at least one of its action keywords and
at least one of its object keywords (plain substring containment). The
first rule to fire wins, so the order of ``rules`` is the tie-break:
"update task status to done" satisfies both Update and Move and is parsed
as Update because Update comes first.
"""
import re
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from teamhub.domain.enums import DEFAULT_STATUS_VOCABULARY, TaskStatus
from teamhub.domain.intents import (
    AssignIntent,
    CreateIntent,
    DeleteIntent,
    HelpIntent,
    IntentTag,
    ListIntent,
    MoveIntent,
    ParsedIntent,
    ParseError,
    TaskReference,
    UnknownIntent,
    UpdateIntent,
)

TASK_ID_PATTERN = re.compile(r"\b([a-f0-9]{24})\b")
QUOTED_PATTERN = re.compile(r"[\"']([^\"']+)[\"']")

MISSING_TITLE_MESSAGE = "Could not extract task title. Please specify what task to create."

_FIELD_LABELS = r"(?:title|name|description|desc|details?|status|state)"
_UNTIL_ASSIGNEE_OR_STATUS = r"(?=\s+assign(?:ed)?\s+to\b|\s+(?:with\s+)?(?:status|state)\b|$)"


class IntentRule(NamedTuple):
    tag: IntentTag
    actions: Tuple[str, ...]
    objects: Tuple[str, ...]
    extract: Callable[[str, str], ParsedIntent]


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def _clean_fragment(fragment: Optional[str]) -> Optional[str]:
    """Trim articles, quotes and a trailing 'task' off a loose reference."""
    if fragment is None:
        return None
    cleaned = fragment.strip().strip("\"'.,!?").strip()
    cleaned = re.sub(r"^(?:the|a|an|my)\s+", "", cleaned)
    cleaned = re.sub(r"^task\s+|(?:^|\s+)task$", "", cleaned).strip()
    return cleaned or None


class IntentClassifier(ABC):
    """Strategy interface for turning a command into an intent."""

    @abstractmethod
    def classify(self, message: str) -> IntentTag:
        """Return only the tag the message would be parsed as."""
        pass

    @abstractmethod
    def parse(self, message: str) -> ParsedIntent:
        """Classify the message and extract the fields of its intent."""
        pass


class KeywordIntentParser(IntentClassifier):
    """Concrete strategy using ordered keyword rules plus regex field capture."""

    def __init__(self, status_vocabulary: Optional[Dict[str, TaskStatus]] = None):
        self.status_vocabulary: Dict[str, TaskStatus] = dict(status_vocabulary or DEFAULT_STATUS_VOCABULARY)
        # Longest phrases first so "in progress" wins over a shorter overlap.
        phrases = sorted(self.status_vocabulary, key=len, reverse=True)
        self._status_alternatives = "|".join(re.escape(phrase) for phrase in phrases)

        self.rules: List[IntentRule] = [
            IntentRule(IntentTag.CREATE, ("create", "add", "new", "make"), ("task",), self._parse_create),
            IntentRule(IntentTag.UPDATE, ("update", "change", "modify", "edit", "set"), ("task",), self._parse_update),
            IntentRule(IntentTag.MOVE, ("move", "change", "set"), ("status", "to", "progress", "done", "todo"), self._parse_move),
            IntentRule(IntentTag.ASSIGN, ("assign", "give", "allocate"), ("task", "to"), self._parse_assign),
            IntentRule(IntentTag.DELETE, ("delete", "remove", "cancel"), ("task",), self._parse_delete),
            IntentRule(IntentTag.LIST, ("show", "list", "get", "display", "what", "which"), ("task", "tasks"), self._parse_list),
            IntentRule(IntentTag.HELP, ("help", "what can", "how", "commands"), (), lambda text, bare: HelpIntent()),
        ]

    # ------------------------------------------------------------------ #
    # Rule matching
    # ------------------------------------------------------------------ #
    def _match(self, text: str) -> Optional[IntentRule]:
        for rule in self.rules:
            if _contains_any(text, rule.actions) and (not rule.objects or _contains_any(text, rule.objects)):
                return rule
        return None

    def classify(self, message: str) -> IntentTag:
        rule = self._match(TASK_ID_PATTERN.sub(" ", message.lower().strip()))
        return rule.tag if rule else IntentTag.UNKNOWN

    def parse(self, message: str) -> ParsedIntent:
        text = message.lower().strip()
        # Ids are hex and may spell a keyword ("add"), so they never take part in matching.
        rule = self._match(TASK_ID_PATTERN.sub(" ", text))
        if rule is None:
            return UnknownIntent()
        # Quoted titles are blanked out so their words cannot be read as
        # statuses, assignees or filters.
        bare = re.sub(r"\s+", " ", QUOTED_PATTERN.sub(" ", text)).strip()
        return rule.extract(text, bare)

    # ------------------------------------------------------------------ #
    # Field capture helpers
    # ------------------------------------------------------------------ #
    def _status(self, phrase: Optional[str]) -> Optional[TaskStatus]:
        if phrase is None:
            return None
        return self.status_vocabulary.get(phrase.strip())

    def _status_after(self, text: str, labels: Tuple[str, ...]) -> Optional[TaskStatus]:
        label_pattern = "|".join(labels)
        match = re.search(
            rf"\b(?:{label_pattern})\b\s*:?\s*(?:to\s+|as\s+)?({self._status_alternatives})(?![\w-])",
            text,
        )
        return self._status(match.group(1)) if match else None

    def _status_mentioned(self, text: str) -> Optional[TaskStatus]:
        match = re.search(rf"(?<![\w-])({self._status_alternatives})(?![\w-])", text)
        return self._status(match.group(1)) if match else None

    @staticmethod
    def _description(text: str) -> Optional[str]:
        match = re.search(
            r"(?:\bwith\s+description\s+|\b(?:description|desc|details?)\s*:\s*)[\"']?(.+?)[\"']?"
            + _UNTIL_ASSIGNEE_OR_STATUS,
            text,
        )
        if not match:
            return None
        return match.group(1).strip() or None

    @staticmethod
    def _task_reference(text: str, verbs: str, loose_patterns: Tuple[str, ...]) -> Optional[TaskReference]:
        id_match = TASK_ID_PATTERN.search(text)
        if id_match:
            return TaskReference(task_id=id_match.group(1))

        for anchor in ("task", verbs):
            quoted = re.search(rf"\b(?:{anchor})\s+[\"']([^\"']+)[\"']", text)
            if quoted and quoted.group(1).strip():
                return TaskReference(title=quoted.group(1).strip())

        for pattern in loose_patterns:
            loose = re.search(pattern, text)
            fragment = _clean_fragment(loose.group(1)) if loose else None
            if fragment:
                return TaskReference(title=fragment)
        return None

    # ------------------------------------------------------------------ #
    # Extractors, one per intent
    # ------------------------------------------------------------------ #
    def _parse_create(self, text: str, bare: str) -> ParsedIntent:
        lead = r"\b(?:create|add|new|make)\s+(?:a\s+)?(?:new\s+)?task\s+"
        quoted = re.search(lead + r"(?:(?:called|named|titled)\s+)?[\"']([^\"']+)[\"']", text)
        if quoted:
            title = quoted.group(1).strip()
        else:
            loose = re.search(
                lead
                + r"(?:(?:to|for|about|called|named|titled)\b)?\s*(.+?)"
                + r"(?=\s+in\s+project\b|\s+with\s+description\b|\s+(?:description|desc|details?)\s*:"
                + r"|\s+assign(?:ed)?\s+to\b|\s+(?:with\s+)?(?:status|state)\b|$)",
                text,
            )
            title = loose.group(1).strip(" \"'") if loose else None

        if not title:
            return ParseError(message=MISSING_TITLE_MESSAGE)

        assignee = re.search(r"\bassign(?:ed)?\s+(?:to\s+)?(.+?)" + _UNTIL_ASSIGNEE_OR_STATUS, bare)
        return CreateIntent(
            title=title,
            description=self._description(text),
            status=self._status_after(bare, ("status", "state")),
            assignee_name=_clean_fragment(assignee.group(1)) if assignee else None,
        )

    def _parse_update(self, text: str, bare: str) -> ParsedIntent:
        stops = rf"(?=\s*\b{_FIELD_LABELS}\b|\s+to\b|\s*:|$)"
        task_ref = self._task_reference(
            text,
            "update|change|modify|edit|set",
            (rf"\btask\b(.*?){stops}", rf"\b(?:update|change|modify|edit|set)\b(.*?){stops}"),
        )
        title = re.search(
            r"\b(?:title|name)\s*:\s*[\"']?(.+?)[\"']?(?=\s+(?:description|desc|details?)\s*:|\s+(?:status|state)\b|$)",
            text,
        )
        return UpdateIntent(
            task_ref=task_ref,
            title=(title.group(1).strip() or None) if title else None,
            description=self._description(text),
            status=self._status_after(bare, ("status", "state")),
        )

    def _parse_move(self, text: str, bare: str) -> ParsedIntent:
        stops = r"(?=\s+(?:to|as|into|status|state)\b|$)"
        task_ref = self._task_reference(
            text,
            "move|change|set",
            (rf"\btask\b(.*?){stops}", rf"\b(?:move|change|set)\b(.*?){stops}"),
        )
        status = self._status_after(bare, ("to", "as", "into", "status", "state"))
        if status is None:
            status = self._status_mentioned(bare)
        return MoveIntent(task_ref=task_ref, status=status)

    def _parse_assign(self, text: str, bare: str) -> ParsedIntent:
        # Greedy: the task title may itself contain "to", the assignee follows the last one.
        task_ref = self._task_reference(
            text,
            "assign|give|allocate",
            (r"\btask\b(.*)\s+to\b", r"\b(?:assign|give|allocate)\b(.*)\s+to\b"),
        )
        assignee = re.search(r".*\bto\s+(.+?)(?:\s+with\b.*)?$", bare)
        return AssignIntent(
            task_ref=task_ref,
            assignee_name=_clean_fragment(assignee.group(1)) if assignee else None,
        )

    def _parse_delete(self, text: str, bare: str) -> ParsedIntent:
        task_ref = self._task_reference(
            text,
            "delete|remove|cancel",
            (r"\btask\b(.*)$", r"\b(?:delete|remove|cancel)\b(.*)$"),
        )
        return DeleteIntent(task_ref=task_ref)

    def _parse_list(self, text: str, bare: str) -> ParsedIntent:
        return ListIntent(
            assigned_to_me="assigned to me" in bare or "my tasks" in bare,
            status=self._status_mentioned(bare),
        )


# Default parser instance
default_parser = KeywordIntentParser()


def parse(command_text: str, status_vocabulary: Optional[Dict[str, TaskStatus]] = None) -> ParsedIntent:
    """Parse a command with the default rules and the given status vocabulary."""
    parser = default_parser if status_vocabulary is None else KeywordIntentParser(status_vocabulary)
    return parser.parse(command_text)
