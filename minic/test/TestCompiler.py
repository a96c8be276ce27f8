import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from minic.__main__ import main
from minic.SyntacticAnalysis.Ast import (
    BinaryOpAst, BoolLiteralAst, DeclarationAst, FunctionDefAst, NumberLiteralAst, Operator, ParamAst, ProgramAst,
    ReturnStatementAst, TypeKind, VarDeclAst, VariableAst)
from minic.SyntacticAnalysis.AstBuilder import ast_to_json
from minic.SemanticAnalysis.SemanticAnalysis import analyse
from minic.Compiler.Compiler import Compiler, CompilerOptions
from minic.Compiler.Printer import Style, format_ast, format_diagnostics, format_statistics, format_summary, format_symbol_table


def good_program():
    return ProgramAst(FunctionDefAst(TypeKind.Int, "main", [ParamAst(TypeKind.Int, "a")], [
        DeclarationAst(TypeKind.Int, [VarDeclAst("x", BinaryOpAst(NumberLiteralAst(2), Operator.PLUS, NumberLiteralAst(3)))]),
        ReturnStatementAst(VariableAst("x"))]))


def bad_program():
    return ProgramAst(FunctionDefAst(TypeKind.Int, "main", [], [
        DeclarationAst(TypeKind.Int, [VarDeclAst("x", BoolLiteralAst(True)), VarDeclAst("y")])]))


class TestPrinter(unittest.TestCase):
    def test_ast_outline(self):
        self.assertEqual(format_ast(good_program()), "\n".join([
            "Program",
            "  FunctionDef: int main",
            "    Parameters:",
            "      Parameter: int a",
            "    Statements:",
            "      Declaration: int",
            "        Variable: x = BinaryOp: plus",
            "          Left: Number: 2",
            "          Right: Number: 3",
            "      Return: Variable: x"]))

    def test_symbol_table(self):
        result = analyse(good_program())
        self.assertEqual(format_symbol_table(result.symbol_table), "\n".join([
            "=== SYMBOL TABLE ===",
            "Scope: global",
            "  Scope: function_main_1",
            "    Symbol{name='a', type='int', value=0, initialized=true, line=-1, col=-1}",
            "    Symbol{name='x', type='int', value=5, initialized=true, line=-1, col=-1}"]))

    def test_statistics(self):
        result = analyse(good_program())
        self.assertEqual(format_statistics(result.symbol_table), "\n".join([
            "=== SYMBOL TABLE STATISTICS ===",
            "Total scopes: 2",
            "Total symbols: 2",
            "Current scope: global"]))

    def test_diagnostics(self):
        result = analyse(bad_program())
        self.assertEqual(format_diagnostics(result), "\n".join([
            "=== SEMANTIC ERRORS FOUND ===",
            "ERROR: [0004] Cannot assign bool to variable 'x' of type int",
            "ERROR: [0006] Function 'main' with return type 'int' must have a return statement",
            "",
            "=== SEMANTIC WARNINGS ===",
            "WARNING: Variable 'y' declared but not initialized"]))
        self.assertEqual(format_diagnostics(analyse(good_program())), "")

    def test_diagnostic_positions(self):
        program = ProgramAst(FunctionDefAst(TypeKind.Void, "main", [], [
            DeclarationAst(TypeKind.Int, [VarDeclAst("y", line=3, column=9)])]))
        self.assertEqual(
            format_diagnostics(analyse(program)).splitlines()[-1],
            "WARNING: Variable 'y' declared but not initialized (line 3, column 9)")

    def test_summary(self):
        self.assertTrue(format_summary(analyse(good_program())).endswith("Semantic analysis PASSED successfully!"))
        summary = format_summary(analyse(bad_program())).splitlines()
        self.assertEqual(summary[1:3], ["Errors: 2", "Warnings: 1"])
        self.assertEqual(summary[-1], "Semantic analysis FAILED due to errors.")

    def test_plain_style_adds_no_codes(self):
        self.assertEqual(Style(False).error("x"), "x")
        self.assertNotEqual(Style(True).error("x"), "x")


class TestCompiler(unittest.TestCase):
    def test_successful_compilation(self):
        compiler = Compiler(good_program(), CompilerOptions(colour=False))
        self.assertEqual(compiler.exit_code, 0)
        report = compiler.report()
        self.assertNotIn("=== SEMANTIC ERRORS FOUND ===", report)
        self.assertNotIn("=== AST STRUCTURE ===", report)
        self.assertTrue(report.endswith(
            "=== COMPILATION SUCCESSFUL ===\nThe program is semantically correct and ready for execution."))

    def test_failed_compilation(self):
        compiler = Compiler(bad_program(), CompilerOptions(colour=False, show_ast=True))
        self.assertEqual(compiler.exit_code, 1)
        report = compiler.report()
        self.assertTrue(report.startswith("=== AST STRUCTURE ===\nProgram"))
        self.assertIn("=== SEMANTIC ERRORS FOUND ===", report)
        self.assertTrue(report.endswith(
            "=== COMPILATION FAILED ===\nThe program contains semantic errors and cannot be executed."))

    def test_warnings_do_not_fail(self):
        program = ProgramAst(FunctionDefAst(TypeKind.Void, "main", [], [
            DeclarationAst(TypeKind.Int, [VarDeclAst("y")])]))
        self.assertEqual(Compiler(program, CompilerOptions(colour=False)).exit_code, 0)

    def test_dump_dir(self):
        with tempfile.TemporaryDirectory() as directory:
            dump_dir = Path(directory) / "out"
            Compiler(good_program(), CompilerOptions(colour=False, dump_dir=dump_dir))
            with open(dump_dir / "ast.json") as file:
                self.assertEqual(json.load(file), ast_to_json(good_program()))
            with open(dump_dir / "symbol_table.json") as file:
                table = json.load(file)
            self.assertEqual(table["child_scopes"][0]["symbols"]["x"]["value"], 5)

    def test_options_from_environment(self):
        with mock.patch.dict(os.environ, {"NO_COLOR": "", "MINIC_DUMP_DIR": "dumps"}):
            options = CompilerOptions.from_environment()
        self.assertFalse(options.colour)
        self.assertEqual(options.dump_dir, Path("dumps"))

        with mock.patch.dict(os.environ, clear=True):
            options = CompilerOptions.from_environment()
        self.assertTrue(options.colour)
        self.assertIsNone(options.dump_dir)


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self._directory = tempfile.TemporaryDirectory()
        self._root = Path(self._directory.name)

    def tearDown(self):
        self._directory.cleanup()

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def write(self, name, content):
        path = self._root / name
        path.write_text(content)
        return str(path)

    def test_good_program(self):
        path = self.write("good.json", json.dumps(ast_to_json(good_program())))
        code, out, _ = self.run_main(path, "--no-colour")
        self.assertEqual(code, 0)
        self.assertIn("=== COMPILATION SUCCESSFUL ===", out)

    def test_bad_program(self):
        path = self.write("bad.json", json.dumps(ast_to_json(bad_program())))
        code, out, _ = self.run_main(path, "--no-colour", "--show-ast")
        self.assertEqual(code, 1)
        self.assertIn("=== AST STRUCTURE ===", out)
        self.assertIn("ERROR: [0004]", out)

    def test_dump_flag(self):
        path = self.write("good.json", json.dumps(ast_to_json(good_program())))
        code, _, _ = self.run_main(path, "--no-colour", "--dump", str(self._root / "dump"))
        self.assertEqual(code, 0)
        self.assertTrue((self._root / "dump" / "symbol_table.json").exists())

    def test_malformed_json(self):
        path = self.write("broken.json", "{not json")
        code, out, err = self.run_main(path, "--no-colour")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error during compilation:", err)

    def test_invalid_tree(self):
        path = self.write("tree.json", json.dumps({"kind": "Program", "function": {"kind": "WhileLoop"}}))
        code, _, err = self.run_main(path, "--no-colour")
        self.assertEqual(code, 1)
        self.assertIn("Unknown node kind 'WhileLoop'", err)

    def test_file_not_utf8(self):
        path = self._root / "latin.json"
        path.write_bytes(b'{"kind": "Program\xff"}')
        code, out, err = self.run_main(str(path), "--no-colour")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("is not valid JSON", err)

    def test_deeply_nested_tree(self):
        expression = '{"kind": "Number", "value": 1}'
        for _ in range(5000):
            expression = '{"kind": "BinaryOp", "op": "+", "left": ' + expression + ', "right": {"kind": "Number", "value": 1}}'
        path = self.write("deep.json", (
            '{"kind": "Program", "function": {"kind": "FunctionDef", "return_type": "void", "name": "main", '
            '"statements": [{"kind": "ExprStmt", "value": ' + expression + '}]}}'))
        code, out, err = self.run_main(path, "--no-colour")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error during compilation:", err)

    def test_missing_file(self):
        code, _, err = self.run_main(str(self._root / "missing.json"), "--no-colour")
        self.assertEqual(code, 1)
        self.assertIn("Error during compilation:", err)
