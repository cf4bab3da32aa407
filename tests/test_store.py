"""Tests for the FIFO store."""

import unittest

from procsim import (
    EventState,
    create_event,
    create_store,
    get,
    initialize_simulation,
    put,
    run_simulation,
    schedule_event,
)
from procsim.core.process import TaskState


class StoreTestCase(unittest.TestCase):
    """Shared producer/consumer processes for store tests."""

    def setUp(self):
        """Set up test fixtures."""
        self.sim = initialize_simulation()
        self.store = create_store()
        self.result = {}
        self.timings = {}
        self.log = []

    def producer(self, sim, event):
        item = event.item if event.item is not None else "foobar"
        self.log.append(("put", event.id, sim.current_time))
        sim, event = yield from put(sim, event, self.store, item)
        self.log.append(("put-done", event.id, sim.current_time))
        self.timings[event.id] = sim.current_time

    def blocking_producer(self, sim, event):
        self.log.append(("put", event.id, sim.current_time))
        sim, event = yield from put(sim, event, self.store, "foobar", blocking=True)
        self.log.append(("put-done", event.id, sim.current_time))
        self.timings[event.id] = sim.current_time

    def consumer(self, sim, event):
        self.log.append(("get", event.id, sim.current_time))
        sim, event = yield from get(sim, event, self.store)
        self.log.append(("got", event.id, sim.current_time))
        self.result[event.id] = event.item
        self.timings[event.id] = sim.current_time
        return event.item

    def schedule(self, time, process, item=None):
        event = create_event(self.sim, time, process, item)
        self.sim = schedule_event(self.sim, event)
        return event

    def run_sim(self):
        self.sim, self.stats = run_simulation(self.sim)
        # At most one side of the store may hold unmatched requests
        self.assertFalse(self.store.put_requests and self.store.get_requests)


class TestStoreOperations(StoreTestCase):
    """Test cases for basic put/get matching."""

    def test_basic_store_operations(self):
        """Test put then get, twice."""
        e1 = self.schedule(0, self.producer)
        e2 = self.schedule(0, self.consumer)
        e3 = self.schedule(10, self.producer)
        e4 = self.schedule(20, self.consumer)

        self.run_sim()

        self.assertEqual(self.result[e2.id], "foobar")
        self.assertEqual(self.result[e4.id], "foobar")
        self.assertEqual(len(self.store.get_requests), 0)
        self.assertEqual(len(self.store.put_requests), 0)
        for event in (e1, e2, e3, e4):
            self.assertEqual(event.status, EventState.COMPLETED)

    def test_out_of_order_store_operations(self):
        """Test get before put."""
        e1 = self.schedule(30, self.consumer)
        self.schedule(40, self.producer)
        e3 = self.schedule(50, self.consumer)
        self.schedule(50, self.producer)

        self.run_sim()

        self.assertEqual(self.result[e1.id], "foobar")
        self.assertEqual(self.result[e3.id], "foobar")
        self.assertEqual(e1.finished_at, 40)
        self.assertEqual(e3.finished_at, 50)
        self.assertEqual(len(self.store.get_requests), 0)
        self.assertEqual(len(self.store.put_requests), 0)

    def test_single_put_single_get(self):
        self.schedule(1, self.producer, item="only")
        consumer = self.schedule(2, self.consumer)

        self.run_sim()

        self.assertEqual(consumer.item, "only")
        self.assertEqual(consumer.finished_at, 2)

    def test_initial_items(self):
        """Test items the store was created with are served first."""
        self.store = create_store(["a", "b"])
        consumer = self.schedule(0, self.consumer)

        self.run_sim()

        self.assertEqual(consumer.item, "a")
        self.assertEqual([entry.item for entry in self.store.put_requests], ["b"])
        self.assertEqual(len(self.store), 1)

    def test_empty_store_is_truthy(self):
        self.assertEqual(len(self.store), 0)
        self.assertTrue(self.store)

    def test_returning_context_keeps_received_item(self):
        """Test a process may return what get() hands back."""
        def consumer(sim, event):
            return (yield from get(sim, event, self.store))

        self.schedule(1, self.producer, item="parcel")
        event = self.schedule(2, consumer)

        self.run_sim()

        self.assertEqual(event.item, "parcel")
        self.assertEqual(event.to_dict()['item'], "parcel")

    def test_store_ids(self):
        first = create_store()
        second = create_store()
        named = create_store(store_id="buffer")

        self.assertNotEqual(first.id, second.id)
        self.assertEqual(named.id, "buffer")


class TestBlockingPut(StoreTestCase):
    """Test cases for blocking and non-blocking deposits."""

    def test_blocking_and_non_blocking_timings(self):
        """Test a blocking producer resumes at the time of consumption."""
        e1 = self.schedule(30, self.blocking_producer)
        e2 = self.schedule(40, self.consumer)
        e3 = self.schedule(50, self.producer)
        e4 = self.schedule(60, self.consumer)

        self.run_sim()

        self.assertEqual(self.result[e2.id], "foobar")
        self.assertEqual(self.timings[e1.id], 40)
        self.assertEqual(self.timings[e2.id], 40)
        self.assertEqual(self.timings[e3.id], 50)
        self.assertEqual(self.timings[e4.id], 60)
        self.assertEqual(e1.finished_at, 40)
        self.assertEqual(e3.finished_at, 50)
        self.assertEqual(len(self.store.get_requests), 0)
        self.assertEqual(len(self.store.put_requests), 0)

    def test_blocking_producer_waits_without_consumer(self):
        producer = self.schedule(10, self.blocking_producer)

        self.run_sim()

        self.assertEqual(producer.status, EventState.PENDING)
        self.assertIsNone(producer.finished_at)
        self.assertEqual(producer.task.state, TaskState.WAITING_ON_STORE)
        self.assertEqual(len(self.store.put_requests), 1)
        self.assertTrue(self.store.put_requests[0].blocking)
        self.assertEqual(self.sim.parked_events(), [producer])

    def test_non_blocking_producer_never_waits(self):
        producer = self.schedule(10, self.producer)

        self.run_sim()

        self.assertEqual(producer.status, EventState.COMPLETED)
        self.assertEqual(producer.finished_at, 10)
        self.assertEqual(len(self.store.put_requests), 1)

    def test_blocking_put_with_waiting_consumer(self):
        """Test a blocking put matched in the same turn does not wait."""
        consumer = self.schedule(5, self.consumer)
        producer = self.schedule(8, self.blocking_producer)

        self.run_sim()

        self.assertEqual(consumer.finished_at, 8)
        self.assertEqual(producer.finished_at, 8)
        self.assertEqual(consumer.item, "foobar")

    def test_resumption_order_blocking(self):
        """Test the parked producer resumes before the consumer continues."""
        producer = self.schedule(45, self.blocking_producer)
        consumer = self.schedule(50, self.consumer)

        self.run_sim()

        self.assertEqual(self.log, [
            ("put", producer.id, 45),
            ("get", consumer.id, 50),
            ("put-done", producer.id, 50),
            ("got", consumer.id, 50),
        ])

    def test_resumption_order_waiting_consumer(self):
        """Test the parked consumer resumes before the producer continues."""
        consumer = self.schedule(20, self.consumer)
        producer = self.schedule(25, self.producer)

        self.run_sim()

        self.assertEqual(self.log, [
            ("get", consumer.id, 20),
            ("put", producer.id, 25),
            ("got", consumer.id, 25),
            ("put-done", producer.id, 25),
        ])


class TestUnbalancedStore(StoreTestCase):
    """Test cases for runs that end with unmatched requests."""

    def test_more_consumers_than_producers(self):
        """Test only the oldest consumer is served."""
        e1 = self.schedule(50, self.consumer)
        e2 = self.schedule(55, self.consumer)
        e3 = self.schedule(60, self.consumer)
        self.schedule(70, self.producer)

        self.run_sim()

        self.assertEqual(self.result[e1.id], "foobar")
        self.assertNotIn(e2.id, self.result)
        self.assertNotIn(e3.id, self.result)
        self.assertEqual(len(self.store.get_requests), 2)
        self.assertEqual(len(self.store.put_requests), 0)
        self.assertEqual(self.sim.parked_events(), [e2, e3])
        self.assertEqual(e2.status, EventState.PENDING)

    def test_more_producers_than_consumers(self):
        """Test the consumer receives the oldest deposit."""
        self.schedule(50, self.producer, item="first")
        self.schedule(55, self.producer, item="second")
        self.schedule(60, self.producer, item="third")
        consumer = self.schedule(70, self.consumer)

        self.run_sim()

        self.assertEqual(self.result[consumer.id], "first")
        self.assertEqual(len(self.store.get_requests), 0)
        self.assertEqual(len(self.store.put_requests), 2)
        self.assertEqual(
            [entry.item for entry in self.store.put_requests], ["second", "third"]
        )

    def test_deposits_served_in_order(self):
        """Test N deposits then M requests serves the first M in deposit order."""
        for time, item in enumerate("abcde", start=1):
            self.schedule(time, self.producer, item=item)
        consumers = [self.schedule(10 + i, self.consumer) for i in range(3)]

        self.run_sim()

        self.assertEqual([c.item for c in consumers], ["a", "b", "c"])
        self.assertEqual(len(self.store.put_requests), 2)

    def test_requests_served_in_order(self):
        """Test M requests then N deposits serves the first N in request order."""
        consumers = [self.schedule(1 + i, self.consumer) for i in range(4)]
        self.schedule(10, self.producer, item="x")
        self.schedule(11, self.producer, item="y")

        self.run_sim()

        self.assertEqual(consumers[0].item, "x")
        self.assertEqual(consumers[1].item, "y")
        self.assertEqual(consumers[0].finished_at, 10)
        self.assertEqual(consumers[1].finished_at, 11)
        self.assertIsNone(consumers[2].item)
        self.assertEqual(len(self.store.get_requests), 2)
        self.assertEqual(list(self.store.get_requests), [consumers[2].task, consumers[3].task])


class TestRelay(StoreTestCase):
    """Test cases for chains of consumers that pass an item on."""

    def relay(self, sim, event):
        sim, event = yield from get(sim, event, self.store)
        self.log.append(("relay", event.id))
        sim, event = yield from put(sim, event, self.store, event.item)

    def test_short_relay_order(self):
        """Test each woken consumer runs before the one that woke it continues."""
        relays = [self.schedule(i, self.relay) for i in range(1, 4)]
        self.schedule(10, self.producer, item="baton")

        self.run_sim()

        self.assertEqual(self.log[1:4], [("relay", e.id) for e in relays])
        self.assertEqual(self.log[-1][0], "put-done")
        self.assertEqual([entry.item for entry in self.store.put_requests], ["baton"])

    def test_long_relay(self):
        """Test thousands of chained handoffs within one turn."""
        count = 5000
        relays = [self.schedule(i, self.relay) for i in range(count)]
        self.schedule(count, self.producer, item="baton")

        self.run_sim()

        self.assertTrue(all(e.status == EventState.COMPLETED for e in relays))
        self.assertTrue(all(e.finished_at == count for e in relays))
        self.assertEqual(len(self.store.get_requests), 0)
        self.assertEqual([entry.item for entry in self.store.put_requests], ["baton"])


if __name__ == '__main__':
    unittest.main()
