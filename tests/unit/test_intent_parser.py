"""
Unit tests for the keyword intent parser.
"""
import pytest

from teamhub.domain.enums import TaskStatus
from teamhub.domain.intent_parser import (
    MISSING_TITLE_MESSAGE,
    KeywordIntentParser,
    default_parser,
    parse,
)
from teamhub.domain.intents import (
    UNKNOWN_COMMAND_MESSAGE,
    AssignIntent,
    CreateIntent,
    DeleteIntent,
    HelpIntent,
    IntentTag,
    ListIntent,
    MoveIntent,
    ParseError,
    TaskReference,
    UnknownIntent,
    UpdateIntent,
)

TASK_ID = "65a0b1c2d3e4f5a6b7c8d9e0"


class TestRuleOrder:
    """The first rule whose keyword sets both match wins."""

    def test_update_wins_over_move(self):
        intent = parse("update task status to done")

        assert isinstance(intent, UpdateIntent)
        assert intent.status == TaskStatus.DONE

    def test_set_status_without_task_is_move(self):
        assert default_parser.classify("set status to done") == IntentTag.MOVE

    @pytest.mark.parametrize("command,expected", [
        ("Create a task to fix the login bug", IntentTag.CREATE),
        ("change task 'Fix login' status to in-progress", IntentTag.UPDATE),
        ("move task 'Fix login' to done", IntentTag.MOVE),
        ("give the login task to Sarah", IntentTag.ASSIGN),
        ("delete task 'Write docs'", IntentTag.DELETE),
        ("show me all tasks", IntentTag.LIST),
        ("help", IntentTag.HELP),
        ("what can you do", IntentTag.HELP),
        ("good morning", IntentTag.UNKNOWN),
    ])
    def test_classify(self, command, expected):
        assert default_parser.classify(command) == expected

    def test_task_id_never_matches_keywords(self):
        # "add" inside a hex id must not turn a move into a create
        intent = parse("move task 65a0b1c2d3e4add6b7c8d9e0 to done")

        assert isinstance(intent, MoveIntent)
        assert intent.task_ref == TaskReference(task_id="65a0b1c2d3e4add6b7c8d9e0")


class TestCreateExtraction:
    def test_loose_title(self):
        intent = parse("Create a task to fix the login bug")

        assert intent == CreateIntent(title="fix the login bug")

    def test_quoted_title_and_description(self):
        intent = parse("Add a new task called 'Update homepage' with description 'Redesign the homepage'")

        assert isinstance(intent, CreateIntent)
        assert intent.title == "update homepage"
        assert intent.description == "redesign the homepage"
        assert intent.assignee_name is None

    def test_assignee_and_status(self):
        intent = parse("make a task to review code assigned to John status in progress")

        assert intent.title == "review code"
        assert intent.assignee_name == "john"
        assert intent.status == TaskStatus.IN_PROGRESS

    def test_words_in_quoted_title_are_not_fields(self):
        intent = parse("create task 'Mark done items' ")

        assert intent.title == "mark done items"
        assert intent.status is None

    def test_missing_title_is_parse_error(self):
        intent = parse("create a task")

        assert isinstance(intent, ParseError)
        assert intent.message == MISSING_TITLE_MESSAGE
        assert intent.tag == IntentTag.ERROR


class TestUpdateExtraction:
    def test_quoted_reference_with_fields(self):
        intent = parse("update task 'Fix login' title: Fix sign-in description: Handle SSO users")

        assert intent.task_ref == TaskReference(title="fix login")
        assert intent.title == "fix sign-in"
        assert intent.description == "handle sso users"
        assert intent.status is None

    def test_direct_id_and_status(self):
        intent = parse(f"change task {TASK_ID} status to completed")

        assert intent.task_ref.is_direct
        assert intent.task_ref.task_id == TASK_ID
        assert intent.status == TaskStatus.DONE

    def test_missing_reference_is_unset(self):
        intent = parse("update task status to done")

        assert intent.task_ref is None


class TestMoveExtraction:
    def test_quoted_reference(self):
        intent = parse("move task 'Fix login' to done")

        assert intent == MoveIntent(task_ref=TaskReference(title="fix login"), status=TaskStatus.DONE)

    def test_in_progress_synonym(self):
        intent = parse("Move task 'Fix login' to in progress")

        assert intent.status == TaskStatus.IN_PROGRESS

    def test_loose_reference(self):
        intent = parse("move the login task to todo")

        assert intent.task_ref == TaskReference(title="login")
        assert intent.status == TaskStatus.TODO

    def test_two_word_todo(self):
        assert parse("move the login task to do").status == TaskStatus.TODO
        assert parse("move task 'Fix login' to done").status == TaskStatus.DONE

    def test_unknown_status_is_unset(self):
        intent = parse("move task 'Fix login' to tomorrow")

        assert isinstance(intent, MoveIntent)
        assert intent.status is None


class TestAssignExtraction:
    def test_quoted_reference(self):
        intent = parse("assign task 'Fix login' to Sarah")

        assert intent == AssignIntent(task_ref=TaskReference(title="fix login"), assignee_name="sarah")

    def test_title_containing_to(self):
        intent = parse("assign task deploy to cloud to Sarah Connor")

        assert intent.task_ref == TaskReference(title="deploy to cloud")
        assert intent.assignee_name == "sarah connor"

    def test_reference_after_verb(self):
        intent = parse("give the login task to Sarah")

        assert intent.task_ref == TaskReference(title="login")
        assert intent.assignee_name == "sarah"


class TestOtherIntents:
    def test_delete(self):
        assert parse("delete task 'Write docs'") == DeleteIntent(task_ref=TaskReference(title="write docs"))

    def test_delete_by_id(self):
        assert parse(f"remove task {TASK_ID}") == DeleteIntent(task_ref=TaskReference(task_id=TASK_ID))

    def test_list_filters(self):
        assert parse("show my tasks") == ListIntent(assigned_to_me=True)
        assert parse("list all todo tasks") == ListIntent(status=TaskStatus.TODO)
        assert parse("list all to do tasks") == ListIntent(status=TaskStatus.TODO)
        assert parse("show me all tasks") == ListIntent()

    def test_help(self):
        assert isinstance(parse("help"), HelpIntent)

    def test_unknown_carries_guidance(self):
        intent = parse("good morning")

        assert isinstance(intent, UnknownIntent)
        assert intent.message == UNKNOWN_COMMAND_MESSAGE


class TestStatusVocabulary:
    def test_custom_vocabulary(self):
        vocabulary = {"todo": TaskStatus.TODO, "finished": TaskStatus.DONE}

        intent = parse("move task 'Fix login' to finished", vocabulary)

        assert intent.status == TaskStatus.DONE

    def test_default_vocabulary_untouched_by_custom_parser(self):
        KeywordIntentParser({"finished": TaskStatus.DONE})

        assert parse("move task 'Fix login' to finished").status is None
