import pytest

from daogen.model import Status
from daogen.section import ForRange, Part, Section


class _FakeMethod:
    def __init__(self):
        self.s = "u"
        self.has_for_params = False
        self.calls = []

    def check_sql_var_by_params(self, param, status):
        self.calls.append((param, status))
        return Part(type=status, value=param)


def sql(text):
    return Part(type=Status.SQL, value=text)


def data(name):
    return Part(type=Status.DATA, value=name)


def add_template(section, tmpl):
    part = section.check_template(tmpl)
    section.members.append(part)
    return part


def test_plain_sql():
    s = Section(members=[sql('"select * from "'), sql('"users"')])
    clauses = s.build_sql()
    assert len(clauses) == 1
    assert s.tmpls == ['generateSQL.WriteString("select * from users ")']


def test_where_clause():
    s = Section(members=[sql('"select * from "'), sql('"users"')])
    add_template(s, "where")
    s.members += [sql('" id>"'), data("id")]
    add_template(s, "end")
    s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("select * from users ")',
        "var whereSQL0 strings.Builder",
        'params["id"] = id',
        'whereSQL0.WriteString("id>@id ")',
        "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
    ]


def test_if_inside_where():
    s = Section(members=[sql('"select * from "'), sql('"users"')])
    add_template(s, "where")
    add_template(s, "if id > 0")
    s.members += [sql('" id>"'), data("id")]
    add_template(s, "end")
    add_template(s, "end")
    s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("select * from users ")',
        "var whereSQL0 strings.Builder",
        "if id > 0 {",
        'params["id"] = id',
        'whereSQL0.WriteString("id>@id ")',
        "}",
        "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
    ]


def test_set_clause():
    s = Section(members=[sql('"update "'), sql('"users"')])
    add_template(s, "set")
    add_template(s, 'if name != ""')
    s.members += [sql('"name="'), data("name")]
    add_template(s, "end")
    s.members.append(sql('","'))
    add_template(s, "if id>0")
    s.members += [sql('"id="'), data("id")]
    add_template(s, "end")
    add_template(s, "end")
    s.members += [sql('" where id="'), data("id")]
    s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("update users ")',
        "var setSQL0 strings.Builder",
        'if name != "" {',
        'params["name"] = name',
        'setSQL0.WriteString("name=@name ")',
        "}",
        'setSQL0.WriteString(", ")',
        "if id>0 {",
        'params["id"] = id',
        'setSQL0.WriteString("id=@id ")',
        "}",
        "helper.JoinSetBuilder(&generateSQL,setSQL0)",
        'params["id"] = id',
        'generateSQL.WriteString("where id=@id ")',
    ]


def test_for_loop_in_where():
    s = Section(members=[sql('"select * from "'), sql('"users"')])
    add_template(s, "where")
    for_part = add_template(s, "for _, name := range names")
    s.members.append(sql('"name="'))
    method = _FakeMethod()
    s.members.append(s.check_sql_var("name", Status.DATA, method))
    add_template(s, "end")
    add_template(s, "end")

    assert method.has_for_params is True
    assert method.calls == []
    assert for_part.value == "for _index, name := range names"

    s.build_sql()
    assert s.tmpls == [
        'generateSQL.WriteString("select * from users ")',
        "var whereSQL0 strings.Builder",
        "for _index, name := range names{",
        'params["nameForWhereSQL0_"+strconv.Itoa(_index)]=name',
        'whereSQL0.WriteString("name=@nameForWhereSQL0_"+strconv.Itoa(_index)+" ")',
        "}",
        "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
    ]
    assert s.for_value == []


def test_for_loop_member_access_keeps_suffix():
    s = Section()
    add_template(s, "for i, name := range names")
    s.members.append(data("name.id"))
    add_template(s, "end")
    s.build_sql()
    assert any(line.endswith("]=name.id") for line in s.tmpls)
    assert s.tmpls[0] == "for i, name := range names{"


def test_check_sql_var_variable_in_loop_is_quoted():
    s = Section()
    add_template(s, "for _, col := range cols")
    method = _FakeMethod()
    part = s.check_sql_var("col", Status.VARIABLE, method)
    assert part.type == Status.VARIABLE
    assert part.value == "u.Quote(col)"
    assert method.has_for_params is False


def test_check_sql_var_delegates_to_method():
    s = Section()
    method = _FakeMethod()
    part = s.check_sql_var("table", Status.VARIABLE, method)
    assert method.calls == [("table", Status.VARIABLE)]
    assert part.value == "table"


def test_get_name_numbers_blocks():
    s = Section()
    assert s.get_name(Status.WHERE) == "whereSQL0"
    assert s.get_name(Status.SET) == "setSQL0"
    second = s.get_name(Status.WHERE)
    assert second.startswith("whereSQL") and second != "whereSQL0"
    assert s.get_name(Status.IF) == "generateSQL"


def test_build_sql_empty_raises():
    with pytest.raises(ValueError, match="sql is null"):
        Section().build_sql()


def test_where_without_end_raises():
    s = Section(members=[sql('"select * from "')])
    add_template(s, "where")
    s.members.append(sql('" id>1"'))
    with pytest.raises(ValueError, match="where not end"):
        s.build_sql()


def test_else_at_top_level_raises():
    s = Section()
    add_template(s, "else")
    with pytest.raises(ValueError):
        s.build_sql()


def test_if_else_branches():
    s = Section()
    add_template(s, "if a")
    s.members.append(sql('"x"'))
    add_template(s, "else")
    s.members.append(sql('"y"'))
    add_template(s, "end")
    clauses = s.build_sql()
    assert len(clauses) == 1
    assert s.tmpls[0] == "if a {"
    assert s.tmpls[2] == "} else {"
    assert s.tmpls[-1] == "}"


@pytest.mark.parametrize(
    "tmpl,status",
    [("if a > 0", Status.IF), ("else", Status.ELSE), ("where", Status.WHERE), ("set", Status.SET), ("end", Status.END)],
)
def test_check_template_types(tmpl, status):
    assert Section().check_template(tmpl).type == status


def test_check_template_errors():
    s = Section()
    with pytest.raises(ValueError, match="template is null"):
        s.check_template("  ")
    with pytest.raises(ValueError, match="unknown syntax"):
        s.check_template("loop x")
    with pytest.raises(ValueError, match="gen keywords"):
        s.check_template("if generateSQL")
    with pytest.raises(ValueError, match="for range syntax error"):
        s.check_template("for name in names")


def test_check_template_duplicate_loop_name():
    s = Section()
    add_template(s, "for _, name := range names")
    with pytest.raises(ValueError, match="same value name"):
        s.check_template("for i, name := range others")


def test_for_template_fields():
    part = Section().check_template("for _, name := range names")
    assert part.split_list == ["for", "_", "name", "range", "names"]
    assert part.for_range.index == "_"
    assert part.for_range.value == "name"
    assert part.for_range.range_list == "names"


def test_for_range_string_round_trip():
    fr = ForRange(index="_index", value="name", range_list="names")
    assert str(fr) == "for _index, name := range names"
    part = Section().check_template(str(fr))
    assert part.for_range == fr


def test_for_range_data_value_matches_params_key():
    fr = ForRange(index="_index", value="name")
    value = fr.data_value("name", "whereSQL0")
    line = fr.append_data_to_params("name", "whereSQL0")
    assert value.startswith('"@nameForWhereSQL0_"')
    assert line == "params[" + value.replace("@", "", 1) + "]=name"


def test_part_param_helpers():
    part = Part(type=Status.DATA, value="user.name")
    assert part.sql_param_name() == "username"
    assert part.add_data_to_param_map() == 'params["username"] = user.name'
    assert not part.is_end()
    assert Part(type=Status.END).is_end()


def test_index_navigation():
    s = Section(members=[sql('"a"'), sql('"b"')])
    assert not s.is_null()
    assert s.has_more()
    s.current_index = 1
    assert not s.has_more()
    s.sub_index()
    assert s.current_index == 0
    assert Section().is_null()