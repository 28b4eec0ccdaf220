import pytest

from mcphost.manager import SessionManager
from mcphost.session import (
    ChatMessage,
    ChatToolCall,
    Message,
    Metadata,
    Role,
    Session,
    load_from_file,
)


def _user(text):
    return ChatMessage(role=Role.USER, content=text)


def test_add_message_autosaves(tmp_path):
    path = tmp_path / "session.json"
    manager = SessionManager(path)
    manager.add_message(_user("hello"))
    loaded = load_from_file(path)
    assert [m.content for m in loaded.messages] == ["hello"]
    assert manager.message_count() == 1


def test_without_path_nothing_is_written(tmp_path):
    manager = SessionManager()
    manager.add_message(_user("hello"))
    assert manager.file_path == ""
    assert list(tmp_path.iterdir()) == []
    assert len(manager) == 1


def test_save_without_path_raises():
    with pytest.raises(ValueError, match="no file path"):
        SessionManager().save()


def test_add_messages_preserves_order(tmp_path):
    path = tmp_path / "s.json"
    manager = SessionManager(path)
    manager.add_messages([_user("one"), ChatMessage(role=Role.ASSISTANT, content="two")])
    assert [m.content for m in manager.get_messages()] == ["one", "two"]
    assert [m.role for m in load_from_file(path).messages] == ["user", "assistant"]


def test_replace_all_messages(tmp_path):
    path = tmp_path / "s.json"
    manager = SessionManager(path)
    manager.add_messages([_user("a"), _user("b"), _user("c")])
    manager.replace_all_messages([_user("z")])
    assert manager.message_count() == 1
    assert [m.content for m in load_from_file(path).messages] == ["z"]


def test_set_metadata_is_saved(tmp_path):
    path = tmp_path / "s.json"
    manager = SessionManager(path)
    meta = Metadata(mcphost_version="dev", provider="ollama", model="llama")
    manager.set_metadata(meta)
    assert load_from_file(path).metadata == meta


def test_get_messages_round_trips_tool_calls():
    manager = SessionManager()
    call = ChatToolCall(id="c1", name="fs__read", arguments='{"p":"x"}')
    manager.add_message(ChatMessage(role=Role.ASSISTANT, tool_calls=[call]))
    manager.add_message(ChatMessage(role=Role.TOOL, content="data", tool_call_id="c1"))
    messages = manager.get_messages()
    assert messages[0].tool_calls == [call]
    assert messages[1].tool_call_id == "c1"


def test_snapshot_is_independent():
    manager = SessionManager()
    manager.add_message(_user("keep"))
    copy = manager.snapshot()
    copy.messages.append(Message(role="user", content="extra"))
    copy.messages[0].content = "changed"
    assert manager.message_count() == 1
    assert manager.get_messages()[0].content == "keep"


def test_existing_session_is_used(tmp_path):
    session = Session()
    session.add_message(Message(role="user", content="earlier"))
    manager = SessionManager(tmp_path / "s.json", session)
    manager.add_message(_user("later"))
    assert [m.content for m in manager.get_messages()] == ["earlier", "later"]


def test_manual_save_writes_file(tmp_path):
    path = tmp_path / "s.json"
    session = Session()
    session.add_message(Message(role="user", content="stored"))
    manager = SessionManager(path, session)
    manager.save()
    assert load_from_file(path).messages[0].content == "stored"
    assert manager.file_path == str(path)