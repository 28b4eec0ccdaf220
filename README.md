# mcphost

Building blocks for a terminal chat host that talks to LLMs and MCP tools.
The package covers the following:

- conversation sessions that are saved as JSON
- rough token estimates
- usage and cost tracking
- rendering of chat messages for the terminal, in a full style or a compact style
- a spinner
- a progress display for model pulls
- an interactive `CLI` class that handles slash commands

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Sessions

`mcphost.session` defines the stored data:

- `Session`, `Message`, `ToolCall` and `Metadata` hold a conversation.
- `ChatMessage`, `ChatToolCall`, `Role` and `TokenUsage` hold messages as they are exchanged with a model.

`message_from_chat` converts a chat message into a stored message, and `Message.to_chat` converts it back. When a tool call's arguments are not a string, `to_chat` encodes them as JSON.

`Session.save_to_file` writes the session as indented JSON. `load_from_file` reads it back. A file that is not valid JSON, or data of the wrong shape, raises `ValueError`.

`mcphost.manager.SessionManager` holds a session behind a lock. When it has a file path, it saves the session after every change. Calling `save()` without a file path raises `ValueError`.

```python
from mcphost.manager import SessionManager
from mcphost.session import ChatMessage, Metadata, Role, load_from_file

manager = SessionManager("chat.json")
manager.set_metadata(Metadata(mcphost_version="0.1.0", provider="anthropic", model="claude"))
manager.add_message(ChatMessage(role=Role.USER, content="Hello"))
print(manager.message_count())        # 1

session = load_from_file("chat.json")
print([m.content for m in session.messages])
```

Messages without an id get one of the form `msg_<16 hex digits>`, together with a timestamp. `snapshot()` returns a copy of the session that you can change without affecting the manager.

## Usage and cost tracking

```python
from mcphost.usage import ModelCost, ModelInfo, ModelLimit, UsageTracker

info = ModelInfo(id="model-id", name="Model", cost=ModelCost(input=3.0, output=15.0),
                 limit=ModelLimit(context=200000, output=8192))
tracker = UsageTracker(info, "anthropic", 80, False)
tracker.update_usage(1500, 500, 0, 0)
print(tracker.last_request_stats().total_cost)   # 0.012
print(tracker.render_usage_info())
```

`render_usage_info()` returns one styled line. Without the colour codes it reads `Tokens: 2.0K (1%) | Cost: $0.0120`. It returns an empty string before any request has been recorded.

Costs are given in dollars per million tokens. Cache read and cache write costs apply only when the model defines them. With OAuth credentials (`is_oauth=True`), tokens are still counted but every cost is zero.

`estimate_and_update_usage(input_text, output_text)` records usage estimated with `mcphost.tokens.estimate_tokens`. That function counts one token per four bytes of UTF-8 text.

## Rendering

`mcphost.theme` provides the parts the renderers are built from:

- `Style`: a small immutable text style with colours, padding, margins, borders and alignment.
- `Theme`: the colour set. `default_theme()` gives the default, and `get_theme()` and `set_theme()` read and change the current one.
- Layout helpers: `place_horizontal`, `join_vertical`, `visible_width` and `text_height`.

`mcphost.markdown.to_markdown(content, width)` renders markdown with `rich` into ANSI-styled text.

There are two renderers:

- `mcphost.messages.MessageRenderer` draws each message as a bordered block (`mcphost.blocks.render_content_block`) with a name and time line.
- `mcphost.compact.CompactRenderer` draws one symbol and label per message. It keeps at most five lines of a tool result.

Both return `UIMessage` values. `MessageContainer` collects them and renders the whole conversation. With no messages, it renders a welcome screen.

`mcphost.spinner.Spinner` animates a line on standard error from a background thread. It can be used as a context manager.

`mcphost.progress.ProgressReader` wraps a stream of newline-delimited JSON pull status lines. It draws a progress bar while the stream is read. `parse_progress_line` turns a single line into a `ProgressUpdate`.

## The CLI class

`mcphost.cli.CLI` displays the conversation and reads prompts with `prompt_toolkit`.

`get_prompt()` reads one prompt. Ctrl+C raises `EOFError`.

`handle_slash_command` understands these commands:

- `/help`
- `/tools`
- `/servers`
- `/history`
- `/usage`
- `/reset-usage`
- `/clear`: the result has `clear_history=True`.
- `/quit`: prints a goodbye and raises `SystemExit(0)`.

`parse_model_name("provider:model")` splits a model string. Without a colon, both parts are `"unknown"`.

## What this package does not do

- It does not connect to MCP servers or run their tools.
- It does not call any model provider.
- It does not look up model prices. You supply a `ModelInfo` yourself.
- It installs no command. You build a chat loop in your own code from `CLI`, `SessionManager` and `UsageTracker`.