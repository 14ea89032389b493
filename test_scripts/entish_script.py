from entmoot import Interpreter, EngineError
from entmoot.entish.model import statement_to_string
from entmoot.entish.parser.entish_parser import EntishParser
import pprint


def main():

    parser = EntishParser()

    test_programs = [
        (
            "Facts, rolls and a comparison",
            r"""
                attribute(Gimli, Strength, 17).
                weapon(Axe, 1d8+1).
                strong(c) :- attribute(c, Strength, s) & s >= 16.
            """,
        ),
        (
            "Clause operators",
            r"""
                ? wielding(c, w) & (weapon(w, d) | tool(w, d)).
                ergo alive(c) ⊕ dead(c).
                ? attribute(c, Strength, s) & s > 10.
            """,
        ),
    ]

    for desc, prog in test_programs:
        print(f"--- {desc} ---")
        try:
            statements = parser.parse(prog)
            pprint.pprint(statements)
            for statement in statements:
                print(statement_to_string(statement))
        except Exception as e:
            print(f"Error parsing '{desc}': {e}")

    print("--- Running a rule session ---")
    interp = Interpreter(seed="entmoot", strict=False)
    interp.load(r"""
        carrying(Gimli, Axe, 6).
        carrying(Gimli, Rope, 2).
        carrying(Legolas, Bow, 3).
        encumbrance(c, Sum(w)) :- carrying(c, item, w).
        damage(Axe, 1d8+1).
        damage(Bow, 1d6).
        roll damage(?, ?).
    """)

    for table, facts in interp.tables.items():
        print(f"{table}:")
        for fact in facts:
            print(f"    {statement_to_string(fact)}")

    for source in ["ergo encumbrance(Gimli, 8).", "ergo encumbrance(Gimli, 9).", "Pr(1d6 >= 4)."]:
        statement = parser.parse(source)[0]
        try:
            print(f"{source} -> {interp.exec(statement)}")
        except EngineError as e:
            print(f"{source} -> error: {e}")


if __name__ == "__main__":
    main()
