# examples/complete_usage.py
"""
Complete mongo-document usage example
"""

import asyncio

from mongo_document import (
    Document,
    MongoConnection,
    after_save,
    before_save,
    mongo_document,
)


# 1. Define models
@mongo_document(
    collection="people",
    indexes=[
        {"keys": {"email": 1}, "unique": True},
        {"keys": {"age": -1, "name": 1}},
    ],
)
class Person(Document):
    def __init__(self, name=None, email=None, age=None):
        self.name = name
        self.email = email
        self.age = age
        super().__init__()

    @classmethod
    def from_json(cls, data):
        person = cls(data.get("name"), data.get("email"), data.get("age"))
        person.pk = data["pk"]
        return person

    def to_json(self, context=None):
        return {
            "pk": self.pk,
            "name": self.name,
            "email": self.email,
            "age": self.age,
        }

    @before_save
    def require_email(self):
        return bool(self.email)

    @after_save
    def announce(self):
        print(f"saved {self.name} ({self.pk})")


async def main():
    # 2. Connect (MONGODB_URI / MONGODB_DATABASE from the environment or .env)
    connection = MongoConnection()
    await connection.ping()
    connection.bind(Person)
    await Person.indexes_ready()

    # 3. Insert, then update in place
    adam = await Person("Adam", "adam@example.com", 33).save()
    adam.age = 34
    await adam.save()

    await Person("Eve", "eve@example.com", 31).save()
    await Person("Cain", "cain@example.com", 8).save()

    # 4. Lookups
    found = await Person.find_one_by_pk(adam.pk)
    print("Found:", found.name, found.age)

    pk = Person.parse_primary_key(str(adam.pk))
    print("Same person:", Person.equal(adam, found, await Person.find_one_by_pk(pk)))

    # 5. Lazy cursors
    adults = await (
        Person.find_all({"age": {"$gte": 18}})
        .sort({"name": Person.sort.ascending})
        .skip(0)
        .limit(10)
        .to_array()
    )
    print("Adults:", [p.name for p in adults])
    print("Adult count:", await Person.find_all({"age": {"$gte": 18}}).count())

    async for person in Person.find_all_by_pk([adam.pk]).sort({"pk": Person.sort.descending}):
        print("By pk:", person.name)

    # 6. Bulk operations
    result = await Person.update({"age": {"$lt": 18}}, {"$set": {"minor": True}})
    print("Updated:", result.modified_count)

    # 7. Atomic find-and-modify and upsert
    eve = await Person.find_and_modify({"name": "Eve"}, {"$inc": {"age": 1}})
    print("Eve is now", eve.age)

    abel = await Person.fupsert({"name": "Abel"}, {"$set": {"email": "abel@example.com", "age": 25}})
    print("Upserted:", abel.pk)

    # 8. Removal
    await abel.remove()
    removed = await Person.remove({"age": {"$lt": 18}})
    print("Removed:", removed)
    print("Total:", await Person.count())

    await Person.remove({})
    await connection.close()


if __name__ == "__main__":
    asyncio.run(main())
