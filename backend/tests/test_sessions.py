import asyncio

from app.schemas.booking import TrainInfo
from app.services.orders import OrderSubmitter
from app.services.passengers import PassengerRegistry, demo_passengers
from app.services.sessions import BookingSession

G2 = TrainInfo(train_no="G2", train_type="G", from_station="上海虹桥", to_station="北京南",
               from_time="09:00", to_time="13:28", duration="4:28")
D312 = G2.model_copy(update={"train_no": "D312", "train_type": "D"})


class SlowGateway:
    def __init__(self):
        self.sent = []

    async def send(self, order):
        await asyncio.sleep(0.05)
        self.sent.append(order)

    async def revoke(self, order):
        self.sent.remove(order)


def make_session():
    return BookingSession(
        session_id="s1",
        registry=PassengerRegistry(seed=demo_passengers()),
        submitter=OrderSubmitter(SlowGateway()),
    )


def test_submit_consumes_draft():
    session = make_session()
    session.start_draft(G2, "2025-01-20").composer.select("1")
    order = asyncio.run(session.submit())
    assert session.draft is None
    assert session.orders == [order.order_id]


def test_draft_started_during_submit_is_kept():
    session = make_session()
    session.start_draft(G2, "2025-01-20").composer.select("1")

    async def submit_and_restart():
        pending = asyncio.ensure_future(session.submit())
        await asyncio.sleep(0)
        session.start_draft(D312, "2025-01-21")
        return await pending

    order = asyncio.run(submit_and_restart())
    assert order.train.train_no == "G2"
    assert session.draft is not None
    assert session.draft.train.train_no == "D312"
