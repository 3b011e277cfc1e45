import pytest
from mock import Mock

from lesscompiler.engine import (
    COMPILE_SCRIPT, CompileOptions, OpaqueFailure, StructuredError,
    compile_css)
from lesscompiler.exceptions import ScriptError


def session_returning(value=None, error=None):
    session = Mock()
    if error is not None:
        session.evaluate.side_effect = error
    else:
        session.evaluate.return_value = value
    return session


def test_options_are_passed_as_data():
    """The compress flag goes in as a binding; the script text never
    changes.
    """
    session = session_returning({'css': 'a{}'})
    compile_css(session, 'a {}', CompileOptions(compress=True))
    compile_css(session, 'a {}', CompileOptions(compress=False))

    (first, second) = session.evaluate.call_args_list
    assert first[0][0] == second[0][0] == COMPILE_SCRIPT
    assert first[0][1] == {'input': 'a {}', 'options': {
        'compress': True, 'filename': None, 'paths': []}}
    assert second[0][1]['options']['compress'] is False


def test_success():
    session = session_returning({'css': 'h1 {\n  color: red;\n}\n'})
    assert compile_css(session, 'h1 { color: red }', CompileOptions()) == \
        'h1 {\n  color: red;\n}\n'


def test_structured_error():
    session = session_returning({'error': {
        'message': 'missing closing `}`', 'type': 'Parse',
        'filename': 'input', 'line': 1, 'column': 4,
        'extract': [None, 'h1 {', None]}})
    with pytest.raises(StructuredError) as excinfo:
        compile_css(session, 'h1 {', CompileOptions())
    error = excinfo.value
    assert error.message == 'missing closing `}`'
    assert error.details() == {
        'type': 'Parse', 'filename': 'input', 'line': 1, 'column': 4,
        'extract': [None, 'h1 {', None]}


def test_structured_error_without_details():
    session = session_returning({'error': {'message': 'oops'}})
    with pytest.raises(StructuredError) as excinfo:
        compile_css(session, '', CompileOptions())
    assert excinfo.value.line is None
    assert excinfo.value.type is None


def test_execution_failure_is_opaque():
    cause = Exception('ReferenceError: less is not defined')
    session = session_returning(error=ScriptError(cause))
    with pytest.raises(OpaqueFailure) as excinfo:
        compile_css(session, '', CompileOptions())
    assert excinfo.value.cause is cause


@pytest.mark.parametrize('value', [None, '', 'a{}', {}, {'css': None}])
def test_unexpected_result_is_opaque(value):
    session = session_returning(value)
    with pytest.raises(OpaqueFailure) as excinfo:
        compile_css(session, '', CompileOptions())
    assert isinstance(excinfo.value.cause, ValueError)


def test_compile_options():
    assert CompileOptions().compress is False
    assert CompileOptions(compress=1).to_dict() == {
        'compress': True, 'filename': None, 'paths': []}
    options = CompileOptions(filename='/src/main.less', paths=('/lib',))
    assert options.to_dict() == {
        'compress': False, 'filename': '/src/main.less', 'paths': ['/lib']}
    assert CompileOptions(filename='a.less') != CompileOptions()
    assert CompileOptions(True) == CompileOptions(compress=True)
    assert CompileOptions(True) != CompileOptions(False)


def test_empty_message_kept():
    """An empty message from the engine is passed on as it is."""
    session = session_returning({'error': {'message': '', 'line': 3}})
    with pytest.raises(StructuredError) as excinfo:
        compile_css(session, '', CompileOptions())
    assert excinfo.value.message == ''
    assert excinfo.value.line == 3


def test_missing_message():
    session = session_returning({'error': {'type': 'Syntax'}})
    with pytest.raises(StructuredError) as excinfo:
        compile_css(session, '', CompileOptions())
    assert excinfo.value.message == 'unknown error'
