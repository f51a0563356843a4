import os

import pytest

from proto_wrangler import main, parse_arguments, resolve_output_path


def read(path):
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in ('PW_OUTPUT', 'PW_INTERFACES', 'PW_USE_TABS', 'PW_VERBOSE'):
        monkeypatch.delenv(key, raising=False)


def test_default_output_next_to_input():
    path = resolve_output_path([os.path.join('/work', 'schema', 'people.proto')], None)
    assert path == os.path.abspath(os.path.join('/work', 'schema', 'people.cs'))


def test_output_directory(temp_dir):
    assert resolve_output_path(['/x/people.proto'], temp_dir) == os.path.join(temp_dir, 'people.cs')
    assert resolve_output_path(['/x/people.proto'], '/y/out/') == os.path.abspath('/y/out/people.cs')


def test_output_file():
    assert resolve_output_path(['/x/a.proto', '/x/b.proto'], '/y/All.cs') == os.path.abspath('/y/All.cs')


def test_parse_arguments():
    args = parse_arguments(['a.proto', 'b.proto', '-o', 'out.cs', '-i', '--debug-field-ids'])
    assert args.inputs == ['a.proto', 'b.proto']
    assert args.output == 'out.cs'
    assert args.interfaces
    assert args.debug_field_ids
    assert not args.use_tabs
    assert not args.preserve_names


def test_main_writes_file(people_proto, temp_dir, capsys):
    output = os.path.join(temp_dir, 'gen', 'People.cs')
    assert main([people_proto, '--output', output, '--interfaces']) == 0
    code = read(output)
    assert code.startswith("// Generated by ProtoWrangler, do not edit by hand.\n")
    assert "public partial class Person : IPerson" in code
    assert f"Generated {output}" in capsys.readouterr().out


def test_main_into_directory(people_proto, temp_dir):
    assert main([people_proto, '-o', temp_dir, '-t']) == 0
    code = read(os.path.join(temp_dir, 'people.cs'))
    assert "\n\tpublic partial class Person\n" in code
    assert "IPerson" not in code


def test_environment_overrides(people_proto, temp_dir, monkeypatch):
    output = os.path.join(temp_dir, 'env.cs')
    monkeypatch.setenv('PW_OUTPUT', output)
    monkeypatch.setenv('PW_INTERFACES', '1')
    assert main([people_proto]) == 0
    assert "public partial interface IPerson" in read(output)


def test_missing_input(temp_dir, capsys):
    missing = os.path.join(temp_dir, 'nope.proto')
    assert main([missing, '-o', temp_dir]) == 1
    assert f"Error: File not found: {missing}" in capsys.readouterr().out


def test_unresolved_type(temp_dir, capsys):
    path = os.path.join(temp_dir, 'bad.proto')
    with open(path, 'w', encoding='utf-8') as f:
        f.write("message A { optional Missing m = 1; }\n")
    assert main([path]) == 1
    assert "unresolved type 'Missing'" in capsys.readouterr().out
    assert not os.path.exists(os.path.join(temp_dir, 'bad.cs'))


def test_message_field_of_own_type(temp_dir, capsys):
    path = os.path.join(temp_dir, 'loop.proto')
    with open(path, 'w', encoding='utf-8') as f:
        f.write("message A { optional A next = 1; }\n")
    assert main([path]) == 0
    assert "public Loop.A Next { get; set; }" in read(os.path.join(temp_dir, 'loop.cs'))


def test_invalid_integer_literal(temp_dir, capsys):
    path = os.path.join(temp_dir, 'octal.proto')
    with open(path, 'w', encoding='utf-8') as f:
        f.write("enum E { A = 08; }\n")
    assert main([path]) == 1
    assert "invalid integer literal '08'" in capsys.readouterr().out
