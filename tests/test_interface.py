from types import SimpleNamespace

import pytest

from daogen.interface import InterfaceMethod, test_param_to_string as render_test_params
from daogen.model import Field, Status
from daogen.params import Param


def make_method():
    return InterfaceMethod(
        table="users",
        params=[
            Param(type="int", name="id"),
            Param(type="string", name="name"),
            Param(type="string", name="names", is_array=True),
        ],
    )


CASES = [
    (
        "select * from @@table",
        ['"select * from "', '"users"'],
        ['generateSQL.WriteString("select * from users ")'],
    ),
    (
        "select * from @@table {{where}} id>@id{{end}}",
        ['"select * from "', '"users"', "where", '" id>"', "id", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            'params["id"] = id',
            'whereSQL0.WriteString("id>@id ")',
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
    (
        "select * from @@table {{where}}{{if id > 0}} id>@id{{end}}{{end}}",
        ['"select * from "', '"users"', "where", "if id > 0", '" id>"', "id", "end", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "if id > 0 {",
            'params["id"] = id',
            'whereSQL0.WriteString("id>@id ")',
            "}",
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
    (
        'update @@table {{set}}{{if name != ""}}name=@name{{end}},{{if id>0}}id=@id{{end}}{{end}} where id=@id',
        [
            '"update "', '"users"', "set", 'if name != ""', '"name="', "name", "end",
            '","', "if id>0", '"id="', "id", "end", "end", '" where id="', "id",
        ],
        [
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
        ],
    ),
    (
        "select * from @@table {{where}} {{for _, name := range names}}name=@name{{end}}{{end}}",
        [
            '"select * from "', '"users"', "where", "for _index, name := range names",
            '"name="', "name", "end", "end",
        ],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "for _index, name := range names{",
            'params["nameForWhereSQL0_"+strconv.Itoa(_index)]=name',
            'whereSQL0.WriteString("name=@nameForWhereSQL0_"+strconv.Itoa(_index)+" ")',
            "}",
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
]


@pytest.mark.parametrize("sql,split_result,generate_result", CASES)
def test_clause_split_and_build(sql, split_result, generate_result):
    method = make_method()
    method.sql_string = sql
    method.sql_state_check_and_split()
    assert [p.value for p in method.section.members] == split_result
    method.section.build_sql()
    assert method.section.tmpls == generate_result


def test_clauses_on_shared_method():
    method = make_method()
    for sql, split_result, generate_result in CASES:
        method.sql_string = sql
        method.sql_state_check_and_split()
        assert [p.value for p in method.section.members] == split_result
        method.section.build_sql()
        assert method.section.tmpls == generate_result


def test_for_params_flag_and_sql_params():
    method = make_method()
    method.sql_string = CASES[4][0]
    method.sql_state_check_and_split()
    assert method.has_for_params is True
    assert method.has_sql_data() is True


def test_data_param_recorded_once():
    method = make_method()
    method.sql_string = "select * from users where id=@id or id=@id"
    method.sql_state_check_and_split()
    assert [p.name for p in method.sql_params] == ["id"]


def test_incomplete_quote_raises():
    method = make_method()
    method.sql_string = "select * from users where name='abc"
    with pytest.raises(ValueError, match="incomplete SQL"):
        method.sql_state_check_and_split()


def test_incomplete_template_raises():
    method = make_method()
    method.sql_string = "select * from users {{where"
    with pytest.raises(ValueError, match="incomplete SQL"):
        method.sql_state_check_and_split()


def test_unknown_variable_raises():
    method = make_method()
    method.sql_string = "select * from users where age=@age"
    with pytest.raises(ValueError, match="unknow variable param:age"):
        method.sql_state_check_and_split()


def test_variable_must_be_string():
    method = make_method()
    with pytest.raises(ValueError, match="variable name must be string"):
        method.check_sql_var_by_params("id", Status.VARIABLE)


def test_variable_is_quoted():
    method = make_method()
    method.s = "u"
    part = method.check_sql_var_by_params("name", Status.VARIABLE)
    assert part.value == "u.Quote(name)"
    assert part.type == Status.VARIABLE


def test_dotted_param_is_string():
    method = InterfaceMethod(params=[Param(name="user", type="User", package="model")])
    part = method.check_sql_var_by_params("user.Name", Status.DATA)
    assert part.value == "user.Name"
    assert method.sql_params == [Param(name="user.Name", type="string")]


def test_escaped_at_is_literal():
    method = make_method()
    method.sql_string = "select \\@x from users"
    method.sql_state_check_and_split()
    assert [p.value for p in method.section.members] == ['"select @x from users"']


def test_check_sql_wraps_error():
    method = make_method()
    method.interface_name = "Querier"
    method.method_name = "Find2"
    method.doc = "select * from users where x=@unknown"
    with pytest.raises(ValueError, match="interface Querier member method Find2 check sql err"):
        method.check_sql()


def test_parse_doc_string_sql_prefix():
    method = InterfaceMethod(method_name="GetAll", doc='GetAll\n\nsql("select * from users")')
    assert method.parse_doc_string() == "select * from users"
    assert method.gorm_option == "Exec"


def test_parse_doc_string_raw_with_result():
    method = InterfaceMethod(method_name="GetAll", doc="select * from users")
    method.result_data = Param(name="result", type="User")
    assert method.parse_doc_string() == "select * from users"
    assert method.gorm_option == "Raw"


def test_parse_doc_string_where():
    method = InterfaceMethod(method_name="FilterX", doc="FilterX where(id=@id)")
    assert method.parse_doc_string() == "id=@id"
    assert method.gorm_option == "Where"


def test_get_sql_doc_string_keeps_first_part_when_method_follows():
    method = InterfaceMethod(method_name="Q", doc="select 1\n\nQ description")
    assert method.get_sql_doc_string() == "select 1"


def test_get_sql_doc_string_takes_second_part():
    method = InterfaceMethod(method_name="Query", doc="Query returns rows\n\nselect 1")
    assert method.get_sql_doc_string() == "select 1"


def test_func_sign_and_doc_comment():
    method = InterfaceMethod(
        method_name="Find1",
        params=[Param(name="id", type="int")],
        result=[Param(name="result", type="User", package="model", is_pointer=True), Param(name="err", type="error")],
        doc=" line1\nline2 ",
    )
    assert method.func_sign() == "Find1(id int) (result *model.User,err error)"
    assert method.doc_comment() == "line1\n//line2"


def test_result_flags():
    method = InterfaceMethod(
        result=[Param(name="rowsAffected", type="int64"), Param(name="err", type="error")]
    )
    assert method.return_rows_affected() is True
    assert method.return_error() is True
    assert InterfaceMethod().return_error() is False


def test_gorm_run_method_and_new_result():
    method = InterfaceMethod(result_data=Param(name="result", type="map[string]interface{}"))
    assert method.has_need_new_result() is True
    assert method.has_got_point() is False
    assert method.gorm_run_method_name() == "Take"
    method.result_data = Param(name="result", type="User", is_array=True)
    assert method.gorm_run_method_name() == "Find"
    assert method.has_got_point() is True


def test_repeat_checks():
    a = InterfaceMethod(method_name="M", interface_name="I1", target_struct="user")
    b = InterfaceMethod(method_name="M", interface_name="I2", target_struct="user")
    c = InterfaceMethod(method_name="M", interface_name="I1", target_struct="user")
    assert a.is_repeat_from_different_interface(b) is True
    assert a.is_repeat_from_same_interface(b) is False
    assert a.is_repeat_from_same_interface(c) is True


def test_sql_param_name():
    assert InterfaceMethod().sql_param_name("user.Name") == "userName"


def test_check_method_keyword():
    meta = SimpleNamespace(fields=[], model_struct_name="User")
    with pytest.raises(ValueError, match="keyword"):
        InterfaceMethod(method_name="Where").check_method([], meta)


def test_check_method_field_clash():
    meta = SimpleNamespace(fields=[Field(name="Age")], model_struct_name="User")
    with pytest.raises(ValueError, match="same name with struct field"):
        InterfaceMethod(method_name="Age", interface_name="I").check_method([], meta)


def test_check_method_different_interface():
    meta = SimpleNamespace(fields=[], model_struct_name="User")
    existing = InterfaceMethod(method_name="M", interface_name="I2", target_struct="user")
    method = InterfaceMethod(method_name="M", interface_name="I1", target_struct="user")
    with pytest.raises(ValueError, match="different interface"):
        method.check_method([existing], meta)


def test_check_params_resolves_types():
    method = InterfaceMethod(package="mypkg", origin_struct=Param(type="User", package="model"))
    method.check_params([
        Param(name="a", type="Local", package="UNDEFINED"),
        Param(name="b", type="T", package="gen"),
    ])
    assert method.params[0].package == "mypkg"
    assert (method.params[1].package, method.params[1].type) == ("model", "User")


def test_check_params_rejects_map():
    method = InterfaceMethod(interface_name="I")
    with pytest.raises(ValueError, match=r"type error on interface \[I\] param: \[m\]"):
        method.check_params([Param(name="m", type="map[string]int")])


def test_check_result_gen_t_and_error():
    method = InterfaceMethod(origin_struct=Param(type="User", package="model"))
    method.check_result([Param(type="T", package="gen"), Param(type="error")])
    assert method.result[0] == Param(name="result", type="User", package="model", is_pointer=True)
    assert method.result[1].name == "err"
    assert method.result_data.type == "User"


def test_check_result_rows_affected():
    method = InterfaceMethod()
    method.check_result([Param(type="RowsAffected", package="gen")])
    assert method.result[0] == Param(name="rowsAffected", type="int64")
    assert method.gorm_option == "Exec"


def test_check_result_gen_m():
    method = InterfaceMethod()
    method.check_result([Param(type="M", package="gen")])
    assert method.result_data.type == "map[string]interface{}"
    assert method.result_data.package == ""


def test_check_result_errors():
    with pytest.raises(ValueError, match="more than 1 error"):
        InterfaceMethod().check_result([Param(type="error"), Param(type="error")])
    with pytest.raises(ValueError, match="more than 1 data"):
        InterfaceMethod().check_result([Param(type="int"), Param(type="string")])
    with pytest.raises(ValueError, match="interface"):
        InterfaceMethod().check_result([Param(type="interface{}")])
    with pytest.raises(ValueError, match="main package"):
        InterfaceMethod().check_result([Param(type="X", package="main")])


def test_check_result_sets_package_for_custom_type():
    method = InterfaceMethod(package="pkg")
    method.check_result([Param(type="Custom")])
    assert method.result_data.package == "pkg"


def test_unit_test_helpers():
    method = InterfaceMethod(
        method_name="Find",
        params=[Param(name="u", type="User", package="model", is_array=True, is_pointer=True), Param(name="id", type="int")],
        result=[Param(type="int"), Param(type="error")],
    )
    assert method.get_test_param_in_tmpl() == "tt.Input.Args[0].(*[]model.User),tt.Input.Args[1].(int)"
    assert method.get_test_result_param_in_tmpl() == "res1,res2"
    assert method.get_assert_in_tmpl() == (
        'assert(t, "Find", res1, tt.Expectation.Ret[0])\n'
        'assert(t, "Find", res2, tt.Expectation.Ret[1])'
    )
    assert render_test_params([]) == ""