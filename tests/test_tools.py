"""Tests for the tool registry, executor and builtin todo tools."""
from unittest.mock import patch

from todo_agent.tools import all_tools, execute_tool, get_tool, tool_schemas, ToolResult


class TestRegistry:
    def test_catalog_order(self):
        assert list(all_tools()) == ["createTodo", "listTodos", "completeTodo", "updateTodo", "deleteTodo"]

    def test_get_tool(self):
        assert get_tool("createTodo").name == "createTodo"
        assert get_tool("nope") is None

    def test_schema_shape(self):
        schemas = {s["name"]: s for s in tool_schemas()}
        create = schemas["createTodo"]
        assert create["description"].startswith("Create a new todo")
        params = create["parameters"]
        assert params["type"] == "object"
        assert params["required"] == ["title"]
        assert params["properties"]["priority"]["enum"] == ["low", "medium", "high"]
        assert "enum" not in params["properties"]["title"]

    def test_optional_only_tools(self):
        schemas = {s["name"]: s for s in tool_schemas()}
        for name in ("listTodos", "completeTodo", "updateTodo", "deleteTodo"):
            assert schemas[name]["parameters"]["required"] == []
        assert schemas["completeTodo"]["parameters"]["properties"]["id"]["type"] == "number"
        assert schemas["listTodos"]["parameters"]["properties"]["completed"]["type"] == "boolean"

    def test_tool_result_flattens(self):
        r = ToolResult(success=True, message="ok", data={"count": 2})
        assert r.to_dict() == {"success": True, "message": "ok", "count": 2}


class TestExecutor:
    def test_unknown_tool(self, store):
        result = execute_tool("launchRocket", {}, store)
        assert result.to_dict() == {"success": False, "message": "Unknown tool: launchRocket"}

    def test_unrecognized_field_rejected(self, store):
        result = execute_tool("createTodo", {"title": "x", "color": "red"}, store)
        assert result.success is False
        assert "Invalid arguments for createTodo" in result.message
        assert store.list() == []

    def test_wrong_type_rejected(self, store):
        result = execute_tool("listTodos", {"priority": "urgent"}, store)
        assert result.success is False
        assert "priority" in result.message

    def test_missing_required(self, store):
        result = execute_tool("createTodo", {}, store)
        assert result.success is False
        assert "title" in result.message

    def test_none_args(self, store):
        result = execute_tool("listTodos", None, store)
        assert result.success is True
        assert result.data["count"] == 0

    def test_non_dict_args(self, store):
        result = execute_tool("listTodos", ["completed"], store)
        assert result.success is False

    def test_numeric_string_id_coerced(self, seeded_store):
        todo = seeded_store.list()[0]
        result = execute_tool("completeTodo", {"id": str(todo.id)}, seeded_store)
        assert result.success is True

    def test_handler_exception(self, store):
        with patch.object(store, "create", side_effect=RuntimeError("boom")):
            result = execute_tool("createTodo", {"title": "x"}, store)
        assert result.success is False
        assert "boom" in result.message


class TestCreateTodo:
    def test_create(self, store):
        result = execute_tool("createTodo", {"title": "Call dentist", "priority": "high"}, store)
        assert result.success is True
        assert result.message == 'Created todo: "Call dentist"'
        assert result.data["todo"]["title"] == "Call dentist"
        assert result.data["todo"]["priority"] == "high"
        assert len(store.list()) == 1

    def test_blank_title(self, store):
        result = execute_tool("createTodo", {"title": "   "}, store)
        assert result.success is False
        assert store.list() == []


class TestListTodos:
    def test_list_all(self, seeded_store):
        result = execute_tool("listTodos", {}, seeded_store)
        assert result.data["count"] == 3
        assert [t["title"] for t in result.data["todos"]] == ["Buy Milk", "Groceries", "Call mom"]

    def test_list_filtered(self, seeded_store):
        result = execute_tool("listTodos", {"date": "2026-10-18"}, seeded_store)
        assert result.data["count"] == 1
        assert result.data["todos"][0]["title"] == "Buy Milk"

    def test_list_completed_false(self, seeded_store):
        seeded_store.complete(seeded_store.list()[0].id)
        result = execute_tool("listTodos", {"completed": False}, seeded_store)
        assert result.data["count"] == 2

    def test_blank_optional_filters_ignored(self, seeded_store):
        result = execute_tool("listTodos", {"priority": "", "date": "", "completed": ""}, seeded_store)
        assert result.success is True
        assert result.data["count"] == 3


class TestCompleteTodo:
    def test_by_id(self, seeded_store):
        todo = seeded_store.list()[1]
        result = execute_tool("completeTodo", {"id": todo.id}, seeded_store)
        assert result.success is True
        assert result.message == "Marked todo as completed"
        assert seeded_store.get(todo.id).completed is True

    def test_by_title(self, seeded_store):
        result = execute_tool("completeTodo", {"title": "buy milk"}, seeded_store)
        assert result.success is True
        assert seeded_store.find_by_title("Buy Milk").completed is True

    def test_blank_id_falls_back_to_title(self, seeded_store):
        result = execute_tool("completeTodo", {"id": "", "title": "groceries"}, seeded_store)
        assert result.success is True
        assert seeded_store.find_by_title("Groceries").completed is True

    def test_unknown_id(self, seeded_store):
        result = execute_tool("completeTodo", {"id": 42}, seeded_store)
        assert result.success is False
        assert result.message == "Could not find todo with ID 42"

    def test_unknown_title_has_no_suggestions(self, seeded_store):
        result = execute_tool("completeTodo", {"title": "Walk dog"}, seeded_store)
        assert result.success is False
        assert result.message == 'Could not find todo with title: "Walk dog"'
        assert "suggestions" not in result.to_dict()

    def test_no_target(self, seeded_store):
        result = execute_tool("completeTodo", {}, seeded_store)
        assert result.success is False
        assert result.message == "Please provide either id or title"


class TestUpdateTodo:
    def test_update_by_title(self, seeded_store):
        result = execute_tool("updateTodo", {"title": "call mom", "priority": "medium", "newTitle": "Call mum"},
                              seeded_store)
        assert result.success is True
        assert result.message == "Updated todo successfully"
        assert result.data["updatedTodo"]["title"] == "Call mum"
        assert result.data["updatedTodo"]["priority"] == "medium"
        assert result.data["updatedTodo"]["dueDate"] == "2026-10-19"

    def test_update_by_id_keeps_other_fields(self, seeded_store):
        todo = seeded_store.list()[0]
        result = execute_tool("updateTodo", {"id": todo.id, "dueDate": "2026-12-01"}, seeded_store)
        updated = result.data["updatedTodo"]
        assert updated["dueDate"] == "2026-12-01"
        assert updated["title"] == "Buy Milk"
        assert updated["priority"] == "high"

    def test_title_miss_returns_suggestions(self, store):
        for title in ["Grocery run", "Go running", "Order records", "Call mom"]:
            store.create(title)
        result = execute_tool("updateTodo", {"title": "groczzzz", "priority": "high"}, store)
        assert result.success is False
        assert result.message.endswith("Did you mean one of these?")
        suggestions = result.data["suggestions"]
        assert [s["title"] for s in suggestions] == ["Grocery run", "Go running", "Order records"]
        assert set(suggestions[0]) == {"id", "title"}

    def test_title_miss_without_suggestions(self, seeded_store):
        result = execute_tool("updateTodo", {"title": "xyz"}, seeded_store)
        assert result.success is False
        assert result.message == 'Could not find todo with title: "xyz"'
        assert "suggestions" not in result.data

    def test_unknown_id(self, seeded_store):
        result = execute_tool("updateTodo", {"id": 7, "priority": "low"}, seeded_store)
        assert result.success is False
        assert "updatedTodo" not in result.data

    def test_no_target(self, seeded_store):
        result = execute_tool("updateTodo", {"priority": "low"}, seeded_store)
        assert result.message == "Please provide either id or title"


class TestDeleteTodo:
    def test_delete_by_title(self, seeded_store):
        result = execute_tool("deleteTodo", {"title": "Groceries"}, seeded_store)
        assert result.success is True
        assert result.message == "Deleted todo"
        assert len(seeded_store.list()) == 2

    def test_delete_missing_title(self, seeded_store):
        result = execute_tool("deleteTodo", {"title": "xyz"}, seeded_store)
        assert result.success is False
        assert len(seeded_store.list()) == 3

    def test_delete_missing_id(self, seeded_store):
        result = execute_tool("deleteTodo", {"id": 5}, seeded_store)
        assert result.message == "Could not find todo with ID 5"

    def test_whitespace_title_deletes_nothing(self, seeded_store):
        result = execute_tool("deleteTodo", {"title": "   "}, seeded_store)
        assert result.success is False
        assert result.message == "Please provide either id or title"
        assert len(seeded_store.list()) == 3
