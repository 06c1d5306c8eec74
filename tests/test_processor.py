#!/usr/bin/env python3
"""
test_processor.py - Tests for template processing

Covers output normalization, the evaluator adapter and end-to-end rendering
of mapping templates through the airspeed engine.
"""

import json
import pytest

from vtl_emulator.rendering import VTLProcessor, normalize_output
from vtl_emulator.rendering.evaluator import bind, quiet_references
from vtl_emulator.template import RenderHooks


class RecordingEvaluator:
    """Evaluator stand-in that returns canned output and records its inputs."""

    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.calls = []

    def render(self, template, namespace, hooks):
        self.calls.append((template, namespace, hooks))
        if self.error:
            raise self.error
        return self.output


@pytest.fixture
def processor():
    return VTLProcessor()


CONTEXT = json.dumps({
    "stage": "prod",
    "identity": {"sourceIp": "203.0.113.7"},
    "params": {
        "path": {"id": "42"},
        "querystring": {"id": "q", "limit": "10"},
        "header": {"Accept": "application/json"}
    },
    "stageVariables": {"env": "staging"}
})


# ============================================================================
# Output normalization
# ============================================================================

class TestNormalizeOutput:
    """Test the JSON re-serialization of rendered output."""

    def test_json_compacted(self):
        assert normalize_output('{\n  "a" : 1,\n  "b" : [ 1, 2 ]\n}') == '{"a":1,"b":[1,2]}'

    def test_key_order_kept(self):
        assert normalize_output('{"z": 1, "a": 2}') == '{"z":1,"a":2}'

    def test_malformed_json_verbatim(self):
        assert normalize_output('{"a":1,}') == '{"a":1,}'

    def test_plain_text_verbatim(self):
        assert normalize_output("Hello World\n") == "Hello World\n"
        assert normalize_output("") == ""

    def test_json_scalars(self):
        assert normalize_output(' "John Doe" ') == '"John Doe"'
        assert normalize_output("30") == "30"

    def test_non_standard_constants_verbatim(self):
        assert normalize_output("NaN") == "NaN"
        assert normalize_output('{"a": Infinity}') == '{"a": Infinity}'

    def test_injected_serializer(self):
        assert normalize_output('{"a": 1}', serializer=lambda value: "custom") == "custom"


# ============================================================================
# Orchestration
# ============================================================================

class TestProcessorOrchestration:
    """Test process() with a stand-in evaluator."""

    def test_namespace_contents(self):
        evaluator = RecordingEvaluator("ok")
        VTLProcessor(evaluator=evaluator).process("tpl", '{"a": 1}', CONTEXT)

        template, namespace, hooks = evaluator.calls[0]
        assert template == "tpl"
        assert namespace["input"].path("$.a") == 1
        assert namespace["input"].params("id") == "42"
        assert namespace["context"].stage == "prod"
        assert namespace["util"].base64Encode("x") == "eA=="
        assert namespace["body"] == '{"a": 1}'
        assert namespace["stageVariables"] == {"env": "staging"}
        assert isinstance(hooks, RenderHooks)

    def test_context_keys_cannot_shadow_namespaces(self):
        evaluator = RecordingEvaluator("ok")
        VTLProcessor(evaluator=evaluator).process("tpl", "", '{"input": "x", "util": 1}')

        namespace = evaluator.calls[0][1]
        assert namespace["input"].body == ""
        assert namespace["util"].urlEncode("a b") == "a+b"

    def test_non_json_body_keeps_raw_text(self):
        evaluator = RecordingEvaluator("ok")
        VTLProcessor(evaluator=evaluator).process("tpl", "plain text", "{}")

        namespace = evaluator.calls[0][1]
        assert namespace["input"].body == "plain text"
        assert namespace["input"].path("$") == {}
        assert namespace["input"].json("$") == "{}"

    def test_array_body_treated_as_empty_object(self):
        evaluator = RecordingEvaluator("ok")
        VTLProcessor(evaluator=evaluator).process("tpl", "[1, 2]", "{}")
        assert evaluator.calls[0][1]["input"].json("$") == "{}"

    def test_output_normalized(self):
        processor = VTLProcessor(evaluator=RecordingEvaluator('{ "a" : [ 1 ] }'))
        assert processor.process("tpl") == '{"a":[1]}'

    def test_injected_serializer_used(self):
        evaluator = RecordingEvaluator('{"a": 1}')
        processor = VTLProcessor(evaluator=evaluator, serializer=lambda value: "serialized")
        assert processor.process("tpl") == "serialized"
        assert evaluator.calls[0][2].render({"b": 2}) == "serialized"

    def test_invalid_context_json(self):
        processor = VTLProcessor(evaluator=RecordingEvaluator("ok"))
        result = processor.process("tpl", "{}", "{not json")
        assert result.startswith("Error processing template: ")

    def test_context_must_be_object(self):
        processor = VTLProcessor(evaluator=RecordingEvaluator("ok"))
        result = processor.process("tpl", "{}", "[1, 2]")
        assert result == "Error processing template: Context must be a JSON object, got list"

    def test_evaluator_errors_become_diagnostics(self):
        evaluator = RecordingEvaluator(error=RuntimeError("Unexpected #end"))
        result = VTLProcessor(evaluator=evaluator).process("#end")
        assert result == "Error processing template: Unexpected #end"

    def test_blank_context_is_empty(self):
        evaluator = RecordingEvaluator("ok")
        assert VTLProcessor(evaluator=evaluator).process("tpl", "", "") == "ok"
        assert evaluator.calls[0][1]["context"].stage == "test"


# ============================================================================
# Evaluator adapter
# ============================================================================

class TestEvaluatorAdapter:
    """Test how values are prepared for the airspeed engine."""

    def test_quiet_references(self):
        assert quiet_references("$input.path('$.a')") == "$!input.path('$.a')"
        assert quiet_references("${name} and $!done") == "$!{name} and $!done"

    def test_directive_targets_untouched(self):
        assert quiet_references("#set($x = $y)") == "#set($x = $!y)"
        assert quiet_references("#foreach( $item in $items )") == "#foreach( $item in $!items )"

    def test_macro_parameters_untouched(self):
        template = "#macro(greet $who $greeting)$greeting $who#end#greet($name 'hi')"
        expected = "#macro(greet $who $greeting)$!greeting $!who#end#greet($!name 'hi')"
        assert quiet_references(template) == expected

    def test_non_references_untouched(self):
        assert quiet_references("costs $5 at \\$name") == "costs $5 at \\$name"
        assert quiet_references("$input.json('$')") == "$!input.json('$')"

    def test_structures_render_as_json(self):
        hooks = RenderHooks()
        bound = bind({"a": [1, {"b": None}]}, hooks)
        assert str(bound) == '{"a":[1,{"b":null}]}'
        assert str(bound["a"]) == '[1,{"b":null}]'

    def test_structures_are_copies(self):
        data = {"a": [1]}
        bound = bind(data, RenderHooks())
        bound["a"].add(2)
        bound.put("c", 3)
        assert data == {"a": [1]}

    def test_velocity_helpers(self):
        hooks = RenderHooks()
        bound = bind({"a": 1, "b": [1, 2, 3]}, hooks)
        assert bound.size() == 2
        assert bound.containsKey("a")
        assert bound.keySet() == ["a", "b"]
        assert bound["b"].size() == 3
        assert bound["b"].get(1) == 2
        assert bound["b"].contains(3)
        assert not bound["b"].isEmpty()

    def test_booleans_render_lowercase(self):
        hooks = RenderHooks()
        assert str(bind(True, hooks)) == "true"
        assert str(bind(False, hooks)) == "false"
        assert bind(True, hooks)
        assert not bind(False, hooks)
        assert bind(True, hooks) == True
        assert str(bind({"f": False, "l": [True]}, hooks)) == '{"f":false,"l":[true]}'

    def test_payload_key_shadows_helper(self):
        bound = bind({"size": "XL"}, RenderHooks())
        with pytest.raises(AttributeError):
            bound.size
        assert bound["size"] == "XL"

    def test_objects_proxied(self):
        class Holder:
            data = {"x": 1}

            def lookup(self, key):
                return self.data.get(key)

        bound = bind(Holder(), RenderHooks())
        assert str(bound.data) == '{"x":1}'
        assert bound.lookup("x") == 1
        assert bound.lookup("y") is None


# ============================================================================
# End-to-end rendering
# ============================================================================

class TestEndToEnd:
    """Render real templates through airspeed."""

    def test_input_json_keeps_string_quoted(self, processor):
        assert processor.process("$input.json('$.Age')", '{"Age":"6"}', "{}") == '"6"'

    def test_input_path_scalar(self, processor):
        assert processor.process("$input.path('$.name')", '{"name":"Jane"}', "{}") == "Jane"

    def test_json_body_mapping(self, processor):
        template = '{"name": "$input.path(\'$.user.name\')", "age": $input.json(\'$.user.age\')}'
        body = '{"user": {"name": "Jane", "age": 31}}'
        assert processor.process(template, body, "{}") == '{"name":"Jane","age":31}'

    def test_missing_path_renders_empty(self, processor):
        assert processor.process('{"v": "$input.path(\'$.nope\')"}', "{}", "{}") == '{"v":""}'

    def test_missing_json_renders_null(self, processor):
        assert processor.process('{"v": $input.json(\'$.nope\')}', "{}", "{}") == '{"v":null}'

    def test_undefined_variable_renders_empty(self, processor):
        assert processor.process("[$undefined]", "{}", "{}") == "[]"

    def test_object_reference_renders_as_json(self, processor):
        template = "#set($obj = $input.path('$.obj'))$obj"
        assert processor.process(template, '{"obj": {"a": 1}}', "{}") == '{"a":1}'

    def test_array_reference_renders_as_json(self, processor):
        result = processor.process("$input.path('$.list')", '{"list": ["x", "y"]}', "{}")
        assert result == '["x","y"]'

    def test_foreach_over_array(self, processor):
        template = "#foreach($item in $input.path('$.items'))$item.id;#end"
        body = '{"items": [{"id": "a"}, {"id": "b"}]}'
        assert processor.process(template, body, "{}") == "a;b;"

    def test_if_on_value(self, processor):
        template = "#if($input.path('$.flag'))yes#end"
        assert processor.process(template, '{"flag": true}', "{}") == "yes"
        assert processor.process(template, "{}", "{}") == ""

    def test_boolean_path(self, processor):
        template = "{\"f\": $input.path('$.flag')}"
        assert processor.process(template, '{"flag": true}', "{}") == '{"f":true}'
        assert processor.process(template, '{"flag": false}', "{}") == '{"f":false}'

    def test_boolean_field_of_object(self, processor):
        template = "#set($obj = $input.path('$.obj'))$obj.on"
        assert processor.process(template, '{"obj": {"on": true}}', "{}") == "true"

    def test_canary_flag(self, processor):
        template = '{"c": $context.isCanaryRequest}'
        assert processor.process(template, "{}", "{}") == '{"c":false}'
        assert processor.process(template, "{}", '{"isCanaryRequest": true}') == '{"c":true}'

    def test_parse_json_boolean(self, processor):
        assert processor.process("$util.parseJson('true')", "{}", "{}") == "true"

    def test_macro_definition_and_call(self, processor):
        template = "#macro(greet $who)hi $who#end#greet('bob')"
        assert processor.process(template, "{}", "{}") == "hi bob"

    def test_context_defaults(self, processor):
        template = '{"ip": "$context.identity.sourceIp", "stage": "$context.stage"}'
        assert processor.process(template, "{}", "{}") == '{"ip":"192.0.2.1","stage":"test"}'

    def test_context_values(self, processor):
        template = '{"ip": "$context.identity.sourceIp", "stage": "$context.stage"}'
        assert processor.process(template, "{}", CONTEXT) == '{"ip":"203.0.113.7","stage":"prod"}'

    def test_authorizer_keys(self, processor):
        context = '{"authorizer": {"tenant": "acme"}}'
        template = "$context.authorizer.tenant/$context.authorizer.scope/$context.authorizer.principalId"
        assert processor.process(template, "{}", context) == "acme/read write/user123"

    def test_authorizer_claims_empty(self, processor):
        assert processor.process("[$context.authorizer.claims]", "{}", "{}") == "[]"

    def test_request_override_tables(self, processor):
        template = "$context.requestOverride.header.get('Content-Type')"
        assert processor.process(template, "{}", "{}") == "application/json"

    def test_params_precedence(self, processor):
        assert processor.process("$input.params('id')", "{}", CONTEXT) == "42"
        assert processor.process("$input.params('limit')", "{}", CONTEXT) == "10"

    def test_params_groups(self, processor):
        template = "$input.params().querystring"
        assert processor.process(template, "{}", CONTEXT) == '{"id":"q","limit":"10"}'

    def test_util_functions(self, processor):
        template = "$util.base64Encode('hello') $util.urlEncode('a b')"
        assert processor.process(template, "{}", "{}") == "aGVsbG8= a+b"

    def test_escape_javascript_of_body(self, processor):
        template = '{"raw": "$util.escapeJavaScript($input.body)"}'
        body = '{"a": "b"}'
        assert processor.process(template, body, "{}") == '{"raw":"{\\"a\\": \\"b\\"}"}'

    def test_parse_json_result_renders_as_json(self, processor):
        template = "$util.parseJson($input.body).inner"
        assert processor.process(template, '{"inner": {"k": true}}', "{}") == '{"k":true}'

    def test_stage_variables(self, processor):
        assert processor.process("$stageVariables.env", "{}", CONTEXT) == "staging"

    def test_raw_body_variable(self, processor):
        assert processor.process("$body", "not json", "{}") == "not json"

    def test_malformed_output_verbatim(self, processor):
        assert processor.process('{"a":1,}', "{}", "{}") == '{"a":1,}'

    def test_input_not_mutated(self, processor):
        template = "#set($list = $input.path('$.list'))#set($ignore = $list.add(9))$input.json('$.list')"
        assert processor.process(template, '{"list": [1]}', "{}") == "[1]"

    def test_invalid_context(self, processor):
        result = processor.process("$input.body", "{}", "nope")
        assert result.startswith("Error processing template: ")
