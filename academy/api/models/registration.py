from sqlalchemy import Column, Date, Integer, Text, TIMESTAMP
from sqlalchemy.sql import func
from academy.core.db import Base


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    type = Column("type", Text, nullable=False)  # 'student' or 'member'
    student_name = Column("studentName", Text, nullable=False)
    dob = Column("dob", Date, nullable=True)
    age = Column("age", Text, nullable=True)
    sex = Column("sex", Text, nullable=True)
    nationality = Column("nationality", Text, nullable=True)
    school_name = Column("schoolName", Text, nullable=True)
    siblings_name = Column("siblingsName", Text, nullable=True)
    reg_no = Column("regNo", Text, nullable=True)
    occupation = Column("occupation", Text, nullable=True)
    area = Column("area", Text, nullable=True)
    # Parents
    father_name = Column("fatherName", Text, nullable=True)
    father_contact = Column("fatherContact", Text, nullable=True)
    father_email = Column("fatherEmail", Text, nullable=True)
    mother_name = Column("motherName", Text, nullable=True)
    mother_contact = Column("motherContact", Text, nullable=True)
    mother_email = Column("motherEmail", Text, nullable=True)
    # Office use
    tshirt_size = Column("tshirtSize", Text, nullable=True)
    sessions_per_month = Column("sessionsPerMonth", Text, nullable=True)
    enrollment_date = Column("enrollmentDate", Date, nullable=True)
    fees_per_month = Column("feesPerMonth", Text, nullable=True)
    squad_level = Column("squadLevel", Text, nullable=True)
    # Declaration
    student_signature = Column("studentSignature", Text, nullable=True)
    declaration_date = Column("declarationDate", Date, nullable=True)
    proof_type = Column("proofType", Text, nullable=True)
    # Files
    photo_url = Column("photoUrl", Text, nullable=True)
    proof_url = Column("proofUrl", Text, nullable=True)
    created_at = Column("createdAt", TIMESTAMP, server_default=func.now(), nullable=True)
