# parus

An interpreter for Parus, a small postfix stack language in which new
operators are written in parentheses and bound to names at run time.

## Installing

    pip install .

To run the tests:

    pip install .[test]
    pytest

## Running

Start the interactive prompt:

    parus

Run a file and then continue at the prompt with the file's definitions and
stack still in place:

    parus program.parus

Command-line flags:

- `-norepl` — evaluate the file only, then exit
- `-notitle` — do not print the title banner before the prompt
- `-help` — print the title and help text, then exit

The first argument that is not a flag is taken as the file to run. If the
file cannot be opened, a message is printed on standard error and the
prompt starts anyway.

The prompt is `Parus> `. While a command has unclosed parentheses or ends
in a hanging quote, input continues on the next line at a `... ` prompt.
Standard input ending (Ctrl-D) leaves the prompt. When standard input is a
terminal, line editing and history are used if the platform's `readline`
module is available.

## The language in brief

Numbers push themselves onto the stack. A bare word looks up its binding
and applies it. A quote (`'`) pushes the next item without applying it.
Parentheses build an operator from the instructions inside them. Comments
start with `;` and run to the end of the line.

    2 3 + outln                 ; prints 5
    (dpl *) 'square define      ; bind a new operator
    7 square outln              ; prints 49

Built-in words:

- stack: `@` (move an item to the top), `@.` (copy an item to the top),
  `length`, `drop`, `dpl`, `setat`, `find`
- binding: `define`, `delete`, `!` (apply the top of the stack), `quotate`
- arithmetic: `+ - * / ^ = < > round`; `/` and `^` always give decimals
- tests: `eqv?`, `integer?`, `decimal?`, `operator?`, `symbol?`, `quoted?`
- control: `if`, `for`, `case` … `end-case` (with `else`), `seq` … `end-seq`,
  `quit`
- input and output: `out`, `outln`, `read`, `getc`, `putc`
- inspection: `?stk`, `?lex`, `?help`

Errors raised by a built-in word or by looking up an unbound word are
printed on standard error, and evaluation goes on with the next word. A
malformed expression (an unmatched parenthesis, a quote with nothing after
it) stops evaluation of that input with a message on standard error.

## Using it from Python

    import io
    from parus.evaluator import Interpreter
    from parus.predefined import predefined_lexicon

    out = io.StringIO()
    interp = Interpreter(predefined_lexicon(), stdin=io.StringIO(), stdout=out, stderr=io.StringIO())
    interp.evaluate("2 3 + outln")
    print(out.getvalue())   # "5\n"

The package is made of these modules:

- `parus.values` — the value types `Integer`, `Decimal`, `Symbol`, `Quoted`,
  `BaseOp` and `UserOp`, the `ParusError` exception, and `copy_value`,
  `is_number` and `format_value`.
- `parus.storage` — `Stack` (index 0 is the top) and `Lexicon` (later
  definitions shadow earlier ones).
- `parus.evaluator` — `tokenize`, `paren_count` and `Interpreter`, with
  `evaluate(expr)` to read and run text and `apply(value)` to apply a single
  value. `Interpreter.evaluate` raises `ParusError` on a malformed
  expression; whatever ran before the fault stays in effect.
- `parus.predefined` — `predefined_lexicon()`, a lexicon holding every
  built-in word, and `equivalent`, the comparison used by `eqv?` and `find`.
- `parus.cli` — `main(argv=None)`, the `parus` command, and `read_command`,
  which gathers prompt lines until a command is complete.

An `Interpreter` built without a lexicon starts with an empty one and knows
no words at all; pass `predefined_lexicon()` to get the built-ins.