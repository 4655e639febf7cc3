"""Unit tests for the command-line front-end."""

import io
import os
import os.path
import subprocess
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

import run_matching
from kuhnmatching import BipartiteGraph, MalformedInput


_GENERATOR = os.path.join(
    os.path.dirname(os.path.abspath(__file__)),
    os.pardir, "tests", "generate", "make_random_graph.py")


def _read(s):
    return run_matching.read_edge_list(io.StringIO(s))


class TestReadEdgeList(unittest.TestCase):
    """Test read_edge_list() function."""

    def test_simple(self):
        graph = _read("2 2\n0 0\n1 1\n")
        self.assertEqual(graph.num_vertex, 2)
        self.assertEqual(graph.edges, [(0,0), (1,1)])

    def test_no_edges(self):
        graph = _read("3 0\n")
        self.assertEqual(graph.num_vertex, 3)
        self.assertEqual(graph.edges, [])

    def test_edge_count_advisory(self):
        """edges are read until end of input regardless of the count"""
        self.assertEqual(_read("2 1\n0 0\n1 0\n").edges, [(0,0), (1,0)])
        self.assertEqual(_read("2 5\n0 1\n").edges, [(0,1)])

    def test_whitespace(self):
        self.assertEqual(_read("  2\n1   0 1\n\n1 1  ").edges, [(0,1), (1,1)])

    def test_missing_header(self):
        with self.assertRaises(MalformedInput):
            _read("")
        with self.assertRaises(MalformedInput):
            _read("2\n")

    def test_bad_header(self):
        with self.assertRaises(MalformedInput):
            _read("two 2\n0 0\n")
        with self.assertRaises(MalformedInput):
            _read("2 x\n0 0\n")
        with self.assertRaises(MalformedInput):
            _read("-1 0\n")
        with self.assertRaises(MalformedInput):
            _read("1_0 1\n0 0\n")
        with self.assertRaises(MalformedInput):
            _read("+2 1\n0 0\n")
        with self.assertRaises(MalformedInput):
            _read("\uff12 1\n0 0\n")

    def test_bad_edge(self):
        with self.assertRaises(MalformedInput):
            _read("2 2\n0 0\n1 x\n")
        with self.assertRaises(MalformedInput):
            _read("2 2\n0 0\n1.5 1\n")
        with self.assertRaises(MalformedInput):
            _read("20 1\n0 1_0\n")
        with self.assertRaises(MalformedInput):
            _read("2 1\n+1 0\n")
        with self.assertRaises(MalformedInput):
            _read("2 1\n0 \uff11\n")

    def test_trailing_garbage(self):
        with self.assertRaises(MalformedInput):
            _read("2 1\n0 0\nend\n")
        with self.assertRaises(MalformedInput):
            _read("2 1\n0 0\n1\n")

    def test_out_of_range(self):
        with self.assertRaises(MalformedInput):
            _read("2 1\n0 2\n")
        with self.assertRaises(MalformedInput):
            _read("2 1\n-1 0\n")


class TestMatchingFormat(unittest.TestCase):
    """Test writing and reading matching output."""

    def test_write(self):
        buf = io.StringIO()
        run_matching.write_matching(buf, 2, [(1,0), (0,1)])
        self.assertEqual(buf.getvalue(),
                         "Maximum matching size: 2\n1 0\n0 1\n")

    def test_write_empty(self):
        buf = io.StringIO()
        run_matching.write_matching(buf, 0, [])
        self.assertEqual(buf.getvalue(), "Maximum matching size: 0\n")

    def test_read(self):
        (size, pairs) = run_matching.read_matching(
            io.StringIO("Maximum matching size: 2\n1 0\n\n0 1\n"))
        self.assertEqual(size, 2)
        self.assertEqual(pairs, [(1,0), (0,1)])

    def test_read_bad(self):
        with self.assertRaises(ValueError):
            run_matching.read_matching(io.StringIO(""))
        with self.assertRaises(ValueError):
            run_matching.read_matching(io.StringIO("0 1\n"))
        with self.assertRaises(ValueError):
            run_matching.read_matching(
                io.StringIO("Maximum matching size: 1\n0 1 2\n"))
        with self.assertRaises(ValueError):
            run_matching.read_matching(io.StringIO(
                "Maximum matching size: 1\nMaximum matching size: 1\n"))


class TestCheckMatching(unittest.TestCase):
    """Test check_matching() function."""

    def setUp(self):
        self.graph = BipartiteGraph(3, [(0,0), (0,1), (1,0), (2,2)])

    def test_valid(self):
        self.assertEqual(
            run_matching.check_matching(self.graph, [(1,0), (0,1), (2,2)]),
            3)
        self.assertEqual(run_matching.check_matching(self.graph, []), 0)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            run_matching.check_matching(self.graph, [(0,0), (0,1)])
        with self.assertRaises(ValueError):
            run_matching.check_matching(self.graph, [(0,0), (1,0)])
        with self.assertRaises(ValueError):
            run_matching.check_matching(self.graph, [(1,1)])
        with self.assertRaises(ValueError):
            run_matching.check_matching(self.graph, [(5,0)])


class TestCommandLine(unittest.TestCase):
    """Test the command-line modes."""

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmpdir = self._tmpdir.name

    def tearDown(self):
        self._tmpdir.cleanup()

    def _write_file(self, name, data):
        filename = os.path.join(self.tmpdir, name)
        with open(filename, "w", encoding="ascii") as f:
            f.write(data)
        return filename

    def _run_main(self, *args):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with mock.patch.object(sys, "argv", ["run_matching.py", *args]):
            with redirect_stdout(stdout), redirect_stderr(stderr):
                status = run_matching.main()
        return (status, stdout.getvalue(), stderr.getvalue())

    def test_console(self):
        filename = self._write_file(
            "g.txt", "3 5\n0 0\n0 2\n1 1\n2 0\n2 1\n")
        (status, out, err) = self._run_main(filename)
        self.assertEqual(status, 0)
        self.assertEqual(out, "Maximum matching size: 3\n2 0\n1 1\n0 2\n")
        self.assertEqual(err, "")

    def test_output_file(self):
        filename = self._write_file("g.txt", "2 1\n0 0\n1 0\n")
        output_filename = os.path.join(self.tmpdir, "g.out")
        (status, out, _err) = self._run_main(
            "--output", output_filename, filename)
        self.assertEqual(status, 0)
        self.assertIn("successful", out)
        with open(output_filename, "r", encoding="ascii") as f:
            self.assertEqual(f.read(), "Maximum matching size: 1\n0 0\n")

    def test_output_file_exists(self):
        filename = self._write_file("g.txt", "2 1\n0 0\n")
        output_filename = self._write_file("g.out", "keep\n")
        (status, _out, err) = self._run_main(
            "--output", output_filename, filename)
        self.assertEqual(status, 1)
        self.assertIn("ERROR:", err)
        with open(output_filename, "r", encoding="ascii") as f:
            self.assertEqual(f.read(), "keep\n")

    def test_malformed_input(self):
        filename = self._write_file("g.txt", "2 1\n0 7\n")
        (status, out, err) = self._run_main(filename)
        self.assertEqual(status, 1)
        self.assertEqual(out, "")
        self.assertIn("ERROR:", err)
        self.assertIn("g.txt", err)

    def test_missing_file(self):
        (status, _out, err) = self._run_main(
            os.path.join(self.tmpdir, "nonexistent.txt"))
        self.assertEqual(status, 1)
        self.assertIn("ERROR:", err)

    def test_bad_options(self):
        filename = self._write_file("g.txt", "1 1\n0 0\n")
        (status, _out, err) = self._run_main("--verify", "--benchmark",
                                             filename)
        self.assertEqual(status, 1)
        self.assertIn("ERROR:", err)
        (status, _out, err) = self._run_main(filename, filename)
        self.assertEqual(status, 1)
        self.assertIn("ERROR:", err)
        (status, _out, err) = self._run_main("--benchmark", "--runs", "0",
                                             filename)
        self.assertEqual(status, 1)
        self.assertIn("ERROR:", err)

    def test_verify(self):
        good = self._write_file("good.txt", "2 3\n0 0\n0 1\n1 0\n")
        self._write_file("good.out", "Maximum matching size: 2\n0 1\n1 0\n")
        bad = self._write_file("bad.txt", "2 2\n0 0\n1 1\n")
        self._write_file("bad.out", "Maximum matching size: 1\n0 0\n")
        (status, out, _err) = self._run_main("--verify", good)
        self.assertEqual(status, 0)
        self.assertIn("All tests passed", out)
        (status, out, _err) = self._run_main("--verify", good, bad)
        self.assertEqual(status, 1)
        self.assertIn("1 tests failed", out)

    def test_verify_invalid_reference(self):
        filename = self._write_file("g.txt", "2 2\n0 0\n1 1\n")
        self._write_file("g.out", "Maximum matching size: 2\n0 0\n1 0\n")
        (status, out, _err) = self._run_main("--verify", filename)
        self.assertEqual(status, 1)
        self.assertIn("invalid reference matching", out)

    def test_benchmark(self):
        filename = self._write_file("g.txt", "3 3\n0 0\n1 0\n1 1\n")
        log_filename = os.path.join(self.tmpdir, "log.txt")
        (status, out, _err) = self._run_main(
            "--benchmark", "--runs", "3", "--log", log_filename, filename)
        self.assertEqual(status, 0)
        self.assertIn("logged", out)

        with open(log_filename, "r", encoding="ascii") as f:
            lines = f.read().splitlines()
        self.assertEqual(len(lines), 6)
        self.assertEqual(lines[0], f"File: {filename}")
        for line in lines[1:4]:
            self.assertGreaterEqual(float(line), 0.0)
        self.assertTrue(lines[4].startswith("Average time: "))
        self.assertTrue(lines[4].endswith("ms"))
        self.assertEqual(lines[5], "")

    def test_benchmark_missing_input(self):
        """bad input leaves an existing log intact"""
        filename = self._write_file("g.txt", "1 1\n0 0\n")
        log_filename = self._write_file("log.txt", "previous\n")
        missing = os.path.join(self.tmpdir, "missing.txt")
        (status, _out, err) = self._run_main(
            "--benchmark", "--log", log_filename, filename, missing)
        self.assertEqual(status, 1)
        self.assertIn("ERROR:", err)
        with open(log_filename, "r", encoding="ascii") as f:
            self.assertEqual(f.read(), "previous\n")

    def test_benchmark_default_files(self):
        with mock.patch.object(run_matching, "run_benchmark",
                               return_value=0) as run_benchmark:
            (status, _out, _err) = self._run_main("--benchmark")
        self.assertEqual(status, 0)
        run_benchmark.assert_called_once_with(
            run_matching.DEFAULT_BENCHMARK_FILES,
            run_matching.DEFAULT_BENCHMARK_RUNS,
            run_matching.DEFAULT_BENCHMARK_LOG)


class TestRandomGraphGenerator(unittest.TestCase):
    """Test the random graph generator script."""

    def _generate(self, *args):
        proc = subprocess.run(
            [sys.executable, _GENERATOR, *args],
            stdout=subprocess.PIPE,
            check=True)
        return proc.stdout.decode("ascii")

    def test_generate(self):
        output = self._generate("--seed", "5", "6", "10")
        graph = run_matching.read_edge_list(io.StringIO(output))
        self.assertEqual(graph.num_vertex, 6)
        self.assertEqual(len(graph.edges), 10)
        self.assertEqual(len(set(graph.edges)), 10)

    def test_generate_dense(self):
        output = self._generate("--seed", "7", "3", "9")
        graph = run_matching.read_edge_list(io.StringIO(output))
        self.assertEqual(sorted(graph.edges),
                         [(u, v) for u in range(3) for v in range(3)])

    def test_same_seed(self):
        self.assertEqual(self._generate("--seed", "11", "8", "20"),
                         self._generate("--seed", "11", "8", "20"))


if __name__ == "__main__":
    unittest.main()
