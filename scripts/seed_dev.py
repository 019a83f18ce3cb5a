from fairdraw.db.engine import make_engine, session_scope
from fairdraw.models import Base
from fairdraw.workflows import create_draw_list, run_draw


def main() -> None:
    """Seed the development database with sample lists and draws."""
    engine = make_engine()

    # Drop and recreate all tables so the sample data starts from a clean slate.
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    with session_scope(engine) as session:
        friends = create_draw_list(
            session,
            name="Friday friends",
            items=["Alice", "Bob", "Carol", "Dave", "Erin", "Frank"],
            kind="names",
            is_favorite=True,
        )
        squad = create_draw_list(
            session,
            name="Five-a-side squad",
            items=[f"Player {n}" for n in range(1, 11)],
            kind="teams",
        )

        records = [
            run_draw(session, "names", {"count": 2}, draw_list=friends),
            run_draw(session, "teams", {"teamCount": 2, "balanceTeams": True}, draw_list=squad),
            run_draw(session, "numbers", {"min": 1, "max": 60, "count": 6}),
            run_draw(session, "order", {"items": ["Talk A", "Talk B", "Talk C"]}),
            run_draw(session, "bingo", {"type": "75", "count": 10}),
        ]

    for record in records:
        print(f"{record.kind:<8} {record.verification_code}")
    print("Development database seeded.")


if __name__ == "__main__":
    main()
